"""Office Open XML（docx/xlsx/pptx）文件屬性。"""

from __future__ import annotations

import zipfile
from pathlib import Path

from .base import ExtractionContext, PartialMetadata, put
from .zip_xml import extracted_entries, read_xml_text, scrape_int, scrape_tag

CORE_PROPERTIES = "docProps/core.xml"
APP_PROPERTIES = "docProps/app.xml"

CORE_TAGS = (
    ("dc:title", "office_title"),
    ("dc:subject", "office_subject"),
    ("dc:creator", "office_author"),
    ("cp:keywords", "office_keywords"),
    ("dc:description", "office_description"),
    ("cp:lastModifiedBy", "office_last_modified_by"),
    ("cp:revision", "office_revision"),
    ("dcterms:created", "office_created"),
    ("dcterms:modified", "office_modified"),
)
APP_TEXT_TAGS = (
    ("Application", "office_application"),
    ("AppVersion", "office_app_version"),
    ("Company", "office_company"),
)
APP_INT_TAGS = (
    ("Pages", "office_pages"),
    ("Words", "office_words"),
    ("Slides", "office_slides"),
)


def extract_office_metadata(path: Path, context: ExtractionContext) -> PartialMetadata:
    result: PartialMetadata = {}
    try:
        with extracted_entries(path, (CORE_PROPERTIES, APP_PROPERTIES)) as entries:
            if CORE_PROPERTIES in entries:
                core_xml = read_xml_text(entries[CORE_PROPERTIES])
                for tag, name in CORE_TAGS:
                    put(result, name, scrape_tag(core_xml, tag))
            if APP_PROPERTIES in entries:
                app_xml = read_xml_text(entries[APP_PROPERTIES])
                for tag, name in APP_TEXT_TAGS:
                    put(result, name, scrape_tag(app_xml, tag))
                for tag, name in APP_INT_TAGS:
                    put(result, name, scrape_int(app_xml, tag))
    except (OSError, zipfile.BadZipFile) as exc:
        context.logger.warning(f"無法讀取 Office 文件屬性: {path} ({exc})")
    return result
