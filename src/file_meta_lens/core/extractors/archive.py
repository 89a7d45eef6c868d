"""封存檔：格式標籤與項目數。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .base import ExtractionContext, PartialMetadata, put

_COMPOUND_SUFFIXES = {
    (".tar", ".gz"): "TAR.GZ",
    (".tar", ".bz2"): "TAR.BZ2",
    (".tar", ".xz"): "TAR.XZ",
}
_SINGLE_SUFFIXES = {
    ".zip": "ZIP",
    ".tar": "TAR",
    ".tgz": "TAR.GZ",
    ".gz": "GZIP",
    ".bz2": "BZIP2",
    ".xz": "XZ",
    ".7z": "7Z",
    ".rar": "RAR",
}


def archive_format_label(path: Path) -> Optional[str]:
    suffixes = tuple(item.lower() for item in path.suffixes[-2:])
    if len(suffixes) == 2 and suffixes in _COMPOUND_SUFFIXES:
        return _COMPOUND_SUFFIXES[suffixes]
    suffix = path.suffix.lower()
    if not suffix:
        return None
    return _SINGLE_SUFFIXES.get(suffix, suffix.lstrip(".").upper())


def extract_archive_metadata(path: Path, context: ExtractionContext) -> PartialMetadata:
    result: PartialMetadata = {}
    label = archive_format_label(path)
    put(result, "archive_format", label)
    if label is None:
        return result
    # 列表工具失敗時項目數保持未知，不改用手動解析
    count = context.archive_inspector.count_entries(path, label)
    put(result, "archive_file_count", count)
    return result
