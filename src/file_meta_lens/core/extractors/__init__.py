"""各格式的 metadata extractor 與分派表。

新增格式只需要新增一個 FormatKind 與對應的表項。
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from ...models import FormatKind
from .archive import extract_archive_metadata
from .audio import extract_audio_metadata
from .base import ExtractionContext, PartialMetadata
from .epub import extract_epub_metadata
from .executable import extract_executable_metadata
from .image import extract_image_metadata
from .office import extract_office_metadata
from .pdf import extract_pdf_metadata
from .text import extract_text_metadata
from .video import extract_video_metadata

Extractor = Callable[[Path, ExtractionContext], PartialMetadata]

EXTRACTORS: dict[FormatKind, Extractor] = {
    FormatKind.PDF: extract_pdf_metadata,
    FormatKind.IMAGE: extract_image_metadata,
    FormatKind.AUDIO: extract_audio_metadata,
    FormatKind.MOVIE: extract_video_metadata,
    FormatKind.PLAIN_TEXT: extract_text_metadata,
    FormatKind.OFFICE_DOCUMENT: extract_office_metadata,
    FormatKind.EPUB: extract_epub_metadata,
    FormatKind.ARCHIVE: extract_archive_metadata,
    FormatKind.EXECUTABLE: extract_executable_metadata,
}


def extractor_for(kind: FormatKind) -> Optional[Extractor]:
    return EXTRACTORS.get(kind)


__all__ = [
    "EXTRACTORS",
    "ExtractionContext",
    "Extractor",
    "PartialMetadata",
    "extractor_for",
]
