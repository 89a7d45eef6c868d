"""ePub 出版資訊（container.xml -> OPF）。"""

from __future__ import annotations

import re
import zipfile
from pathlib import Path
from typing import Optional

from .base import ExtractionContext, PartialMetadata, put
from .zip_xml import extracted_entries, read_xml_text, scrape_tag

CONTAINER_ENTRY = "META-INF/container.xml"

_ROOTFILE_PATTERN = re.compile(r'<rootfile\b[^>]*\bfull-path="([^"]+)"', re.DOTALL)

OPF_TAGS = (
    ("dc:title", "epub_title"),
    ("dc:creator", "epub_author"),
    ("dc:publisher", "epub_publisher"),
    ("dc:language", "epub_language"),
    ("dc:identifier", "epub_identifier"),
    ("dc:date", "epub_date"),
    ("dc:description", "epub_description"),
    ("dc:subject", "epub_subject"),
)


def rootfile_path(container_xml: str) -> Optional[str]:
    match = _ROOTFILE_PATTERN.search(container_xml)
    return match.group(1) if match else None


def extract_epub_metadata(path: Path, context: ExtractionContext) -> PartialMetadata:
    result: PartialMetadata = {}
    try:
        with extracted_entries(path, (CONTAINER_ENTRY,)) as entries:
            if CONTAINER_ENTRY not in entries:
                return result
            opf_name = rootfile_path(read_xml_text(entries[CONTAINER_ENTRY]))
        if not opf_name:
            return result
        with extracted_entries(path, (opf_name,)) as entries:
            if opf_name not in entries:
                return result
            opf_xml = read_xml_text(entries[opf_name])
        for tag, name in OPF_TAGS:
            put(result, name, scrape_tag(opf_xml, tag))
    except (OSError, zipfile.BadZipFile) as exc:
        context.logger.warning(f"無法讀取 ePub 資訊: {path} ({exc})")
    return result
