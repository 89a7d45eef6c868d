"""檔案格式分類列舉。"""

from __future__ import annotations

from enum import Enum


class FormatKind(str, Enum):
    PDF = "PDF"
    IMAGE = "IMAGE"
    AUDIO = "AUDIO"
    MOVIE = "MOVIE"
    PLAIN_TEXT = "PLAIN_TEXT"
    OFFICE_DOCUMENT = "OFFICE_DOCUMENT"
    EPUB = "EPUB"
    ARCHIVE = "ARCHIVE"
    EXECUTABLE = "EXECUTABLE"
    UNKNOWN = "UNKNOWN"
