"""音訊標籤與串流資訊。

標籤來源分兩層：先讀跨格式的 common 命名空間（mutagen easy 介面），再依
格式專屬命名空間（iTunes atom、ID3 frame）的對照表覆寫。格式專屬命名空間
內若有多個 key 對應同一欄位，結果取決於標籤的迭代順序，最後寫入者勝出。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import mutagen

from ...utils import media_utils
from ...utils.image_utils import decode_text
from .base import ExtractionContext, PartialMetadata, put

COMMON_KEY_MAP = {
    "title": "audio_title",
    "artist": "audio_artist",
    "album": "audio_album",
    "date": "audio_year",
    "genre": "audio_genre",
    "comment": "audio_comment",
    "composer": "audio_composer",
    "tracknumber": "audio_track_number",
}

ITUNES_KEY_MAP = {
    "\xa9nam": "audio_title",
    "\xa9ART": "audio_artist",
    "aART": "audio_artist",
    "\xa9alb": "audio_album",
    "\xa9day": "audio_year",
    "\xa9gen": "audio_genre",
    "\xa9cmt": "audio_comment",
    "\xa9wrt": "audio_composer",
    "trkn": "audio_track_number",
}

ID3_KEY_MAP = {
    "TIT2": "audio_title",
    "TPE1": "audio_artist",
    "TALB": "audio_album",
    "TDRC": "audio_year",
    "TYER": "audio_year",
    "TCON": "audio_genre",
    "COMM": "audio_comment",
    "TCOM": "audio_composer",
    "TRCK": "audio_track_number",
}


def _first(value: Any) -> Any:
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _id3_text(frame: Any) -> Optional[str]:
    text = getattr(frame, "text", None)
    if text is None:
        return decode_text(frame)
    return decode_text(_first(text))


def normalize_tag_value(name: str, value: Any) -> Any:
    if name == "audio_track_number":
        return media_utils.parse_track_number(value)
    if name == "audio_year":
        text = decode_text(_first(value))
        return text[:4] if text else None
    return decode_text(_first(value))


def map_itunes_tags(tags: Any) -> PartialMetadata:
    result: PartialMetadata = {}
    for key, value in tags.items():
        name = ITUNES_KEY_MAP.get(key)
        if name is None:
            continue
        if name == "audio_track_number":
            value = _first(value)
        put(result, name, normalize_tag_value(name, value))
    return result


def map_id3_tags(tags: Any) -> PartialMetadata:
    result: PartialMetadata = {}
    for key, frame in tags.items():
        # COMM 等 frame 的 key 形如 "COMM::eng"
        name = ID3_KEY_MAP.get(key.split(":", 1)[0])
        if name is None:
            continue
        put(result, name, normalize_tag_value(name, _id3_text(frame)))
    return result


def _map_common(easy: Any) -> PartialMetadata:
    result: PartialMetadata = {}
    if easy is None or not easy.tags:
        return result
    for key, name in COMMON_KEY_MAP.items():
        if key in easy.tags:
            put(result, name, normalize_tag_value(name, easy.tags[key]))
    return result


def _map_specific(raw: Any) -> PartialMetadata:
    if raw is None or not raw.tags:
        return {}
    keys = list(raw.tags.keys())
    if any(key in ITUNES_KEY_MAP for key in keys):
        return map_itunes_tags(raw.tags)
    if any(key.split(":", 1)[0] in ID3_KEY_MAP for key in keys):
        return map_id3_tags(raw.tags)
    return {}


def _codec_label(raw: Any) -> Optional[str]:
    codec = getattr(raw.info, "codec", None)
    if isinstance(codec, int):
        return media_utils.fourcc_to_string(codec)
    if codec:
        return str(codec)
    mime = getattr(raw, "mime", None)
    if mime:
        return str(mime[0]).split("/", 1)[-1]
    return None


def extract_audio_metadata(path: Path, context: ExtractionContext) -> PartialMetadata:
    result: PartialMetadata = {}
    logger = context.logger
    try:
        raw = mutagen.File(str(path))
    except Exception as exc:
        logger.warning(f"無法讀取音訊: {path} ({exc})")
        return result
    if raw is None:
        logger.debug(f"mutagen 無法辨識音訊格式: {path}")
        return result

    info = raw.info
    length = getattr(info, "length", None)
    if length and length > 0:
        result["duration"] = float(length)
    put(result, "audio_bitrate", media_utils.format_bitrate(getattr(info, "bitrate", None)))
    put(result, "audio_codec", _codec_label(raw))

    try:
        easy = mutagen.File(str(path), easy=True)
    except Exception as exc:
        logger.debug(f"無法讀取 common 標籤: {path} ({exc})")
        easy = None
    result.update(_map_common(easy))
    result.update(_map_specific(raw))
    return result
