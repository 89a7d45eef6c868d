"""PDF 文件屬性。"""

from __future__ import annotations

from pathlib import Path

from pypdf import PdfReader

from ...utils import time_utils
from ...utils.image_utils import decode_text
from .base import ExtractionContext, PartialMetadata, put

_TEXT_FIELDS = (
    ("/Title", "pdf_title"),
    ("/Author", "pdf_author"),
    ("/Subject", "pdf_subject"),
    ("/Producer", "pdf_producer"),
    ("/Creator", "pdf_creator"),
)


def _header_version(reader: PdfReader) -> str | None:
    header = reader.pdf_header
    if header.startswith("%PDF-"):
        return header[len("%PDF-") :].strip() or None
    return None


def _keywords_text(value) -> str | None:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value if str(item).strip()) or None
    return decode_text(value)


def extract_pdf_metadata(path: Path, context: ExtractionContext) -> PartialMetadata:
    result: PartialMetadata = {}
    logger = context.logger
    try:
        reader = PdfReader(str(path))
    except Exception as exc:
        logger.warning(f"無法開啟 PDF: {path} ({exc})")
        return result

    put(result, "pdf_version", _header_version(reader))
    encrypted = bool(reader.is_encrypted)
    result["pdf_encrypted"] = encrypted
    if encrypted:
        try:
            reader.decrypt("")
        except Exception as exc:
            logger.debug(f"PDF 無法以空密碼解密: {path} ({exc})")

    try:
        put(result, "pdf_page_count", len(reader.pages))
    except Exception as exc:
        logger.debug(f"無法取得 PDF 頁數: {path} ({exc})")

    try:
        info = reader.metadata
    except Exception as exc:
        logger.debug(f"無法讀取 PDF 文件資訊: {path} ({exc})")
        info = None
    if not info:
        return result

    for key, name in _TEXT_FIELDS:
        put(result, name, decode_text(info.get(key)))
    put(result, "pdf_keywords", _keywords_text(info.get("/Keywords")))

    for key, name in (("/CreationDate", "pdf_creation_date"), ("/ModDate", "pdf_modification_date")):
        raw = info.get(key)
        if raw:
            put(result, name, time_utils.parse_pdf_date(str(raw)))

    return result
