"""影片容器與軌道資訊（透過 ffprobe）。"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from ...utils import media_utils
from .base import ExtractionContext, PartialMetadata, put

_LOCATION_TAG_KEYS = (
    "location",
    "com.apple.quicktime.location.ISO6709",
    "location-eng",
)


def stream_codec(stream: dict[str, Any]) -> Optional[str]:
    """以四字元碼表示軌道編碼；容器未記錄 tag 時退回編碼器名稱。"""
    tag = stream.get("codec_tag")
    if isinstance(tag, str):
        try:
            tag_value = int(tag, 16)
        except ValueError:
            tag_value = 0
        if tag_value:
            # ffprobe 以 little-endian 存放 tag，轉成高位元組在前再解碼
            swapped = int.from_bytes(tag_value.to_bytes(4, "little"), "big")
            code = media_utils.fourcc_to_string(swapped)
            if code.isprintable() and code.strip():
                return code
    return stream.get("codec_name")


def _languages(streams: list[dict[str, Any]]) -> list[str]:
    languages: list[str] = []
    for stream in streams:
        language = (stream.get("tags") or {}).get("language")
        if language:
            languages.append(str(language))
    return languages


def summarize_probe(probe: dict[str, Any], path: Path) -> PartialMetadata:
    result: PartialMetadata = {}
    streams = probe.get("streams") or []
    container = probe.get("format") or {}
    container_tags = container.get("tags") or {}

    try:
        duration = float(container.get("duration", 0) or 0)
    except (TypeError, ValueError):
        duration = 0.0
    if duration > 0:
        result["duration"] = duration

    put(result, "video_creation_date", container_tags.get("creation_time"))
    for key in _LOCATION_TAG_KEYS:
        if container_tags.get(key):
            put(result, "video_location", str(container_tags[key]))
            break
    put(result, "video_bitrate", media_utils.format_bitrate(container.get("bit_rate")))
    put(result, "video_container", path.suffix.lstrip(".").upper())

    video_streams = [item for item in streams if item.get("codec_type") == "video"]
    audio_streams = [item for item in streams if item.get("codec_type") == "audio"]
    subtitle_streams = [item for item in streams if item.get("codec_type") == "subtitle"]

    if video_streams:
        first_video = video_streams[0]
        put(result, "video_width", first_video.get("width"))
        put(result, "video_height", first_video.get("height"))
        put(
            result,
            "video_frame_rate",
            media_utils.format_frame_rate(
                first_video.get("avg_frame_rate") or first_video.get("r_frame_rate")
            ),
        )
        put(result, "video_codec", stream_codec(first_video))
    if audio_streams:
        put(result, "video_audio_codec", stream_codec(audio_streams[0]))

    result["video_audio_track_count"] = len(audio_streams)
    result["video_subtitle_track_count"] = len(subtitle_streams)
    put(result, "video_audio_languages", _languages(audio_streams))
    put(result, "video_subtitle_languages", _languages(subtitle_streams))
    return result


def extract_video_metadata(path: Path, context: ExtractionContext) -> PartialMetadata:
    probe = context.media_inspector.probe(path)
    if probe is None:
        context.logger.debug(f"無法取得影片資訊: {path}")
        return {}
    return summarize_probe(probe, path)
