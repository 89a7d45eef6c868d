"""延伸 metadata 聚合。

所有欄位都各自可選，彼此之間沒有隱含關係。欄位以領域前綴分組
（system / pdf / image / audio / video / office / epub / text / archive /
executable），結構保持扁平。
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Optional

from .quarantine_info import QuarantineInfo


@dataclass(frozen=True)
class ExtendedMetadata:
    # system attributes
    system_attributes: Optional[dict[str, str]] = None
    quarantine: Optional[QuarantineInfo] = None
    where_from_urls: Optional[list[str]] = None
    user_tags: Optional[list[str]] = None
    comment: Optional[str] = None

    # PDF
    pdf_version: Optional[str] = None
    pdf_page_count: Optional[int] = None
    pdf_encrypted: Optional[bool] = None
    pdf_title: Optional[str] = None
    pdf_author: Optional[str] = None
    pdf_subject: Optional[str] = None
    pdf_producer: Optional[str] = None
    pdf_creator: Optional[str] = None
    pdf_keywords: Optional[str] = None
    pdf_creation_date: Optional[datetime] = None
    pdf_modification_date: Optional[datetime] = None

    # image / EXIF / IPTC / XMP / PNG / HEIC
    image_width: Optional[int] = None
    image_height: Optional[int] = None
    image_orientation: Optional[str] = None
    exif_camera_make: Optional[str] = None
    exif_camera_model: Optional[str] = None
    exif_lens_model: Optional[str] = None
    exif_focal_length: Optional[str] = None
    exif_aperture: Optional[str] = None
    exif_iso: Optional[str] = None
    exif_shutter_speed: Optional[str] = None
    exif_date_taken: Optional[datetime] = None
    exif_gps_latitude: Optional[str] = None
    exif_gps_longitude: Optional[str] = None
    exif_gps_altitude: Optional[str] = None
    iptc_keywords: Optional[list[str]] = None
    iptc_caption: Optional[str] = None
    iptc_credit: Optional[str] = None
    iptc_copyright: Optional[str] = None
    xmp_rating: Optional[int] = None
    png_software: Optional[str] = None
    png_creation_time: Optional[str] = None
    png_text_chunks: Optional[dict[str, str]] = None
    heic_live_photo_id: Optional[str] = None

    # audio (duration is shared with video)
    duration: Optional[float] = None
    audio_title: Optional[str] = None
    audio_artist: Optional[str] = None
    audio_album: Optional[str] = None
    audio_year: Optional[str] = None
    audio_genre: Optional[str] = None
    audio_comment: Optional[str] = None
    audio_composer: Optional[str] = None
    audio_track_number: Optional[int] = None
    audio_bitrate: Optional[str] = None
    audio_codec: Optional[str] = None

    # video
    video_creation_date: Optional[str] = None
    video_location: Optional[str] = None
    video_width: Optional[int] = None
    video_height: Optional[int] = None
    video_frame_rate: Optional[str] = None
    video_codec: Optional[str] = None
    video_audio_codec: Optional[str] = None
    video_bitrate: Optional[str] = None
    video_container: Optional[str] = None
    video_audio_track_count: Optional[int] = None
    video_audio_languages: Optional[list[str]] = None
    video_subtitle_track_count: Optional[int] = None
    video_subtitle_languages: Optional[list[str]] = None

    # office document
    office_title: Optional[str] = None
    office_subject: Optional[str] = None
    office_author: Optional[str] = None
    office_keywords: Optional[str] = None
    office_description: Optional[str] = None
    office_last_modified_by: Optional[str] = None
    office_revision: Optional[str] = None
    office_created: Optional[str] = None
    office_modified: Optional[str] = None
    office_application: Optional[str] = None
    office_app_version: Optional[str] = None
    office_company: Optional[str] = None
    office_pages: Optional[int] = None
    office_words: Optional[int] = None
    office_slides: Optional[int] = None

    # ePub
    epub_title: Optional[str] = None
    epub_author: Optional[str] = None
    epub_publisher: Optional[str] = None
    epub_language: Optional[str] = None
    epub_identifier: Optional[str] = None
    epub_date: Optional[str] = None
    epub_description: Optional[str] = None
    epub_subject: Optional[str] = None

    # text
    text_encoding: Optional[str] = None
    text_line_ending: Optional[str] = None
    text_line_count: Optional[int] = None
    text_word_count: Optional[int] = None
    text_character_count: Optional[int] = None
    text_front_matter: Optional[dict[str, str]] = None

    # archive
    archive_format: Optional[str] = None
    archive_file_count: Optional[int] = None

    # executable
    executable_format: Optional[str] = None
    executable_architectures: Optional[list[str]] = None
    executable_code_signed: Optional[bool] = None
    executable_signing_authority: Optional[str] = None

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(item.name for item in fields(cls))

    @property
    def has_any_data(self) -> bool:
        return any(not is_empty_value(getattr(self, name)) for name in self.field_names())

    def non_empty_items(self) -> dict[str, Any]:
        return {
            name: getattr(self, name)
            for name in self.field_names()
            if not is_empty_value(getattr(self, name))
        }

    def to_dict(self) -> dict[str, object]:
        result: dict[str, object] = {}
        for name, value in self.non_empty_items().items():
            if isinstance(value, datetime):
                result[name] = value.isoformat()
            elif isinstance(value, QuarantineInfo):
                result[name] = value.to_dict()
            else:
                result[name] = value
        return result


def is_empty_value(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, dict, tuple)):
        return len(value) == 0
    return False
