"""純文字檔：編碼、換行、行數統計與 Markdown front matter。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .base import ExtractionContext, PartialMetadata, put

_BOMS = (
    (b"\xef\xbb\xbf", "UTF-8 (BOM)", "utf-8-sig"),
    (b"\xff\xfe", "UTF-16 LE (BOM)", "utf-16"),
    (b"\xfe\xff", "UTF-16 BE (BOM)", "utf-16"),
)
_FALLBACK_ENCODINGS = (
    ("utf-8", "UTF-8"),
    ("utf-16", "UTF-16"),
    ("ascii", "ASCII"),
    ("latin-1", "Latin-1"),
)
MARKDOWN_SUFFIXES = {".md", ".markdown", ".mdown", ".mkd"}


def detect_encoding(data: bytes) -> tuple[str, Optional[str]]:
    """回傳 (顯示名稱, codec)；BOM 優先，否則依序嘗試解碼。"""
    for bom, label, codec in _BOMS:
        if data.startswith(bom):
            return label, codec
    for codec, label in _FALLBACK_ENCODINGS:
        try:
            data.decode(codec)
        except UnicodeDecodeError:
            continue
        return label, codec
    return "Unknown", None


def detect_line_ending(text: str) -> str:
    """依優先順序判定，不計數：CRLF > LF > CR。"""
    if "\r\n" in text:
        return "CRLF"
    if "\n" in text:
        return "LF"
    if "\r" in text:
        return "CR"
    return "None"


def parse_front_matter(text: str) -> Optional[dict[str, str]]:
    if not text.startswith("---"):
        return None
    parts = text.split("---")
    if len(parts) < 3:
        return None
    values: dict[str, str] = {}
    for line in parts[1].splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip()
        if key:
            values[key] = value.strip()
    return values or None


def extract_text_metadata(path: Path, context: ExtractionContext) -> PartialMetadata:
    result: PartialMetadata = {}
    max_bytes = int(context.config.get("extraction.text_max_bytes", 8 * 1024 * 1024))
    try:
        with path.open("rb") as handle:
            data = handle.read(max_bytes)
    except OSError as exc:
        context.logger.warning(f"無法讀取文字檔: {path} ({exc})")
        return result

    label, codec = detect_encoding(data)
    result["text_encoding"] = label
    if codec is None:
        return result
    text = data.decode(codec, errors="replace")

    result["text_line_ending"] = detect_line_ending(text)
    result["text_line_count"] = len(text.splitlines())
    result["text_word_count"] = len(text.split())
    result["text_character_count"] = len(text)

    if path.suffix.lower() in MARKDOWN_SUFFIXES:
        put(result, "text_front_matter", parse_front_matter(text))
    return result
