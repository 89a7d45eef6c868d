"""檔案格式分類工具。"""

from __future__ import annotations

import mimetypes
import stat
import struct
from pathlib import Path
from typing import Optional

import magic

from ..models import FormatKind
from .logger import get_logger

# Mach-O 與 universal binary 的 magic number（兩種位元組順序）
MACH_O_MAGICS = {
    0xFEEDFACE: "Mach-O 32-bit",
    0xCEFAEDFE: "Mach-O 32-bit",
    0xFEEDFACF: "Mach-O 64-bit",
    0xCFFAEDFE: "Mach-O 64-bit",
    0xCAFEBABE: "Universal Binary",
}

OFFICE_CONTENT_TYPES = {
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
}
EPUB_CONTENT_TYPE = "application/epub+zip"

_ARCHIVE_CONTENT_TYPES = {
    "application/zip",
    "application/x-zip-compressed",
    "application/x-tar",
    "application/gzip",
    "application/x-gzip",
    "application/x-bzip2",
    "application/x-xz",
    "application/x-7z-compressed",
    "application/vnd.rar",
    "application/x-rar-compressed",
    "application/x-compressed-tar",
}
_TEXT_CONTENT_TYPES = {
    "application/json",
    "application/xml",
    "application/javascript",
    "application/x-sh",
    "application/x-python-code",
    "application/x-yaml",
    "application/yaml",
    "application/toml",
}
_EXECUTABLE_CONTENT_TYPES = {
    "application/x-mach-binary",
    "application/x-executable",
    "application/x-pie-executable",
    "application/x-sharedlib",
    "application/x-dosexec",
}

_EXTENSION_KINDS = {
    "pdf": FormatKind.PDF,
    "office": FormatKind.OFFICE_DOCUMENT,
    "epub": FormatKind.EPUB,
    "image": FormatKind.IMAGE,
    "audio": FormatKind.AUDIO,
    "movie": FormatKind.MOVIE,
    "text": FormatKind.PLAIN_TEXT,
    "archive": FormatKind.ARCHIVE,
    "executable": FormatKind.EXECUTABLE,
}


def read_magic_number(path: Path) -> Optional[int]:
    try:
        with path.open("rb") as handle:
            head = handle.read(4)
    except OSError:
        return None
    if len(head) < 4:
        return None
    return struct.unpack(">I", head)[0]


def is_mach_o(path: Path) -> bool:
    return read_magic_number(path) in MACH_O_MAGICS


def has_executable_bit(path: Path) -> bool:
    try:
        mode = path.stat().st_mode
    except OSError:
        return False
    return stat.S_ISREG(mode) and bool(mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))


def _sniff_content_type(path: Path, logger=None) -> Optional[str]:
    try:
        return magic.from_file(str(path), mime=True)
    except (magic.MagicException, OSError) as exc:
        if logger is not None:
            logger.debug(f"無法探測內容類型: {path} ({exc})")
        return None


def resolve_content_type(path: Path, logger=None) -> Optional[str]:
    """先查已知的 Office/ePub 型別與系統型別表，再以內容探測補足。"""
    ext = path.suffix.lower()
    if ext in OFFICE_CONTENT_TYPES:
        return OFFICE_CONTENT_TYPES[ext]
    if ext == ".epub":
        return EPUB_CONTENT_TYPE
    guessed, _encoding = mimetypes.guess_type(path.name)
    if guessed:
        return guessed
    return _sniff_content_type(path, logger)


def kind_from_content_type(content_type: Optional[str]) -> Optional[FormatKind]:
    if not content_type:
        return None
    content_type = content_type.lower()
    # 兩者都是 ZIP 容器，必須先於一般封存判斷
    if content_type in OFFICE_CONTENT_TYPES.values():
        return FormatKind.OFFICE_DOCUMENT
    if content_type == EPUB_CONTENT_TYPE:
        return FormatKind.EPUB
    if content_type == "application/pdf":
        return FormatKind.PDF
    if content_type.startswith("image/"):
        return FormatKind.IMAGE
    if content_type.startswith("audio/"):
        return FormatKind.AUDIO
    if content_type.startswith("video/"):
        return FormatKind.MOVIE
    if content_type in _ARCHIVE_CONTENT_TYPES:
        return FormatKind.ARCHIVE
    if content_type in _EXECUTABLE_CONTENT_TYPES:
        return FormatKind.EXECUTABLE
    if content_type.startswith("text/") or content_type in _TEXT_CONTENT_TYPES:
        return FormatKind.PLAIN_TEXT
    return None


def kind_from_extension(path: Path, config=None) -> Optional[FormatKind]:
    ext = path.suffix.lower()
    if not ext:
        return None
    if config is None:
        from ..config import ConfigManager

        config = ConfigManager()
    return _EXTENSION_KINDS.get(config.kind_name_for_extension(ext) or "")


def classify_file_type(path: Path, config=None, logger=None) -> FormatKind:
    """判定單一檔案的 FormatKind；無法辨識時回傳 UNKNOWN，不拋出例外。

    順序：Mach-O magic、內容類型、副檔名表、執行權限。
    """
    logger = logger or get_logger("FileClassifier")
    if is_mach_o(path):
        return FormatKind.EXECUTABLE

    kind = kind_from_content_type(resolve_content_type(path, logger))
    if kind is None:
        kind = kind_from_extension(path, config)
    if kind is None and has_executable_bit(path):
        kind = FormatKind.EXECUTABLE
    if kind is None:
        logger.debug(f"無法辨識檔案格式: {path}")
        return FormatKind.UNKNOWN
    return kind
