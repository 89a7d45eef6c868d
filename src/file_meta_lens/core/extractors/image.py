"""影像 metadata：尺寸、EXIF、GPS、IPTC、XMP、PNG 文字區塊、HEIC Live Photo。"""

from __future__ import annotations

import re
import struct
from pathlib import Path
from typing import Any, Optional

from PIL import Image, IptcImagePlugin

from ...utils import image_utils, time_utils
from .base import ExtractionContext, PartialMetadata, put

EXIF_IFD_POINTER = 0x8769
GPS_IFD_POINTER = 0x8825

TAG_ORIENTATION = 0x0112
TAG_MAKE = 0x010F
TAG_MODEL = 0x0110
TAG_EXPOSURE_TIME = 0x829A
TAG_F_NUMBER = 0x829D
TAG_ISO = 0x8827
TAG_DATETIME_ORIGINAL = 0x9003
TAG_SHUTTER_SPEED_VALUE = 0x9201
TAG_APERTURE_VALUE = 0x9202
TAG_FOCAL_LENGTH = 0x920A
TAG_MAKER_NOTE = 0x927C
TAG_LENS_MODEL = 0xA434

GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4
GPS_ALTITUDE_REF = 5
GPS_ALTITUDE = 6

IPTC_KEYWORDS = (2, 25)
IPTC_CREDIT = (2, 110)
IPTC_COPYRIGHT = (2, 116)
IPTC_CAPTION = (2, 120)

# Apple MakerNote 中的 content identifier，用於配對 Live Photo 影片
APPLE_CONTENT_IDENTIFIER_TAG = 0x0011

_XMP_RATING_PATTERNS = (
    re.compile(rb'xmp:Rating\s*=\s*"([^"]*)"'),
    re.compile(rb"<xmp:Rating>([^<]*)</xmp:Rating>"),
)


def parse_xmp_rating(value: Any) -> Optional[int]:
    """評分可能是字串（"4"、"4.0"）或數值。"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    text = value.decode("utf-8", errors="ignore") if isinstance(value, bytes) else str(value)
    try:
        return int(float(text.strip()))
    except ValueError:
        return None


def _xmp_packet(image: Image.Image) -> Optional[bytes]:
    for key in ("xmp", "XML:com.adobe.xmp"):
        packet = image.info.get(key)
        if packet:
            return packet.encode("utf-8") if isinstance(packet, str) else bytes(packet)
    return None


def _rating_from_xmp(packet: bytes) -> Optional[int]:
    for pattern in _XMP_RATING_PATTERNS:
        match = pattern.search(packet)
        if match:
            return parse_xmp_rating(match.group(1))
    return None


def apple_content_identifier(maker_note: bytes) -> Optional[str]:
    """解析 Apple MakerNote（`Apple iOS` 開頭的 IFD），取出 tag 0x11。

    IFD 從 MakerNote 起點 +14 的位置開始，offset 也以 MakerNote 起點計算。
    """
    if not maker_note.startswith(b"Apple iOS") or len(maker_note) < 16:
        return None
    order = ">" if maker_note[12:14] == b"MM" else "<"
    (count,) = struct.unpack(order + "H", maker_note[14:16])
    for index in range(count):
        start = 16 + index * 12
        entry = maker_note[start : start + 12]
        if len(entry) < 12:
            break
        tag, type_id, length, offset = struct.unpack(order + "HHII", entry)
        if tag != APPLE_CONTENT_IDENTIFIER_TAG or type_id != 2:
            continue
        raw = entry[8 : 8 + length] if length <= 4 else maker_note[offset : offset + length]
        return image_utils.decode_text(raw)
    return None


def _aperture(exif_ifd) -> Optional[str]:
    f_number = image_utils.to_float(exif_ifd.get(TAG_F_NUMBER))
    if f_number:
        return image_utils.format_aperture(f_number)
    apex = image_utils.to_float(exif_ifd.get(TAG_APERTURE_VALUE))
    if apex is not None:
        return image_utils.format_aperture(image_utils.aperture_from_apex(apex))
    return None


def _shutter_speed(exif_ifd) -> Optional[str]:
    exposure = image_utils.to_float(exif_ifd.get(TAG_EXPOSURE_TIME))
    if exposure:
        return image_utils.format_shutter_speed(exposure)
    apex = image_utils.to_float(exif_ifd.get(TAG_SHUTTER_SPEED_VALUE))
    if apex is not None:
        return image_utils.format_shutter_speed(2 ** (-apex))
    return None


def _iso(exif_ifd) -> Optional[str]:
    value = exif_ifd.get(TAG_ISO)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    return str(int(value))


def _focal_length(exif_ifd) -> Optional[str]:
    focal = image_utils.to_float(exif_ifd.get(TAG_FOCAL_LENGTH))
    if not focal:
        return None
    return f"{int(focal)}mm"


def _extract_exif(image: Image.Image, result: PartialMetadata) -> None:
    exif = image.getexif()
    if not exif:
        return

    put(result, "image_orientation", image_utils.orientation_label(exif.get(TAG_ORIENTATION)))
    put(result, "exif_camera_make", image_utils.decode_text(exif.get(TAG_MAKE)))
    put(result, "exif_camera_model", image_utils.decode_text(exif.get(TAG_MODEL)))

    exif_ifd = exif.get_ifd(EXIF_IFD_POINTER)
    if exif_ifd:
        put(result, "exif_lens_model", image_utils.decode_text(exif_ifd.get(TAG_LENS_MODEL)))
        put(result, "exif_focal_length", _focal_length(exif_ifd))
        put(result, "exif_aperture", _aperture(exif_ifd))
        put(result, "exif_shutter_speed", _shutter_speed(exif_ifd))
        put(result, "exif_iso", _iso(exif_ifd))
        taken = image_utils.decode_text(exif_ifd.get(TAG_DATETIME_ORIGINAL))
        if taken:
            put(result, "exif_date_taken", time_utils.parse_exif_datetime(taken))
        maker_note = exif_ifd.get(TAG_MAKER_NOTE)
        if isinstance(maker_note, bytes):
            put(result, "heic_live_photo_id", apple_content_identifier(maker_note))

    gps_ifd = exif.get_ifd(GPS_IFD_POINTER)
    if gps_ifd:
        _extract_gps(gps_ifd, result)


def _extract_gps(gps_ifd, result: PartialMetadata) -> None:
    for ref_tag, value_tag, name in (
        (GPS_LATITUDE_REF, GPS_LATITUDE, "exif_gps_latitude"),
        (GPS_LONGITUDE_REF, GPS_LONGITUDE, "exif_gps_longitude"),
    ):
        degrees = image_utils.dms_to_degrees(gps_ifd.get(value_tag))
        if degrees is None:
            continue
        reference = image_utils.decode_text(gps_ifd.get(ref_tag))
        put(result, name, image_utils.format_gps_coordinate(degrees, reference))

    altitude = image_utils.to_float(gps_ifd.get(GPS_ALTITUDE))
    if altitude is not None:
        put(
            result,
            "exif_gps_altitude",
            image_utils.format_gps_altitude(altitude, gps_ifd.get(GPS_ALTITUDE_REF)),
        )


def _iptc_values(value: Any) -> list[str]:
    items = value if isinstance(value, list) else [value]
    texts = [image_utils.decode_text(item) for item in items]
    return [text for text in texts if text]


def _extract_iptc(image: Image.Image, result: PartialMetadata) -> None:
    iptc = IptcImagePlugin.getiptcinfo(image)
    if not iptc:
        return
    if IPTC_KEYWORDS in iptc:
        put(result, "iptc_keywords", _iptc_values(iptc[IPTC_KEYWORDS]))
    for key, name in (
        (IPTC_CAPTION, "iptc_caption"),
        (IPTC_CREDIT, "iptc_credit"),
        (IPTC_COPYRIGHT, "iptc_copyright"),
    ):
        if key in iptc:
            values = _iptc_values(iptc[key])
            put(result, name, values[0] if values else None)


def _extract_png_text(image: Image.Image, result: PartialMetadata) -> None:
    chunks = getattr(image, "text", None)
    if not chunks:
        return
    text_chunks = {str(key): str(value) for key, value in chunks.items()}
    put(result, "png_text_chunks", text_chunks)
    put(result, "png_software", text_chunks.get("Software"))
    put(result, "png_creation_time", text_chunks.get("Creation Time"))


def extract_image_metadata(path: Path, context: ExtractionContext) -> PartialMetadata:
    result: PartialMetadata = {}
    logger = context.logger
    image_utils.register_heif_opener()
    try:
        with Image.open(path) as image:
            width, height = image.size
            put(result, "image_width", width)
            put(result, "image_height", height)

            for step in (_extract_exif, _extract_iptc, _extract_png_text):
                try:
                    step(image, result)
                except Exception as exc:
                    logger.warning(f"影像 metadata 區塊解析失敗 ({step.__name__}): {path} ({exc})")

            packet = _xmp_packet(image)
            if packet:
                put(result, "xmp_rating", _rating_from_xmp(packet))
    except Exception as exc:
        logger.warning(f"無法讀取影像: {path} ({exc})")
    return result
