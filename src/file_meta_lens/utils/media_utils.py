"""音訊與影片欄位的格式化工具。"""

from __future__ import annotations

import struct
from fractions import Fraction
from typing import Any, Optional


def fourcc_to_string(value: int) -> str:
    """32 位元數值轉四字元碼，最高位元組在前。"""
    return "".join(chr((value >> shift) & 0xFF) for shift in (24, 16, 8, 0))


def decode_itunes_track_number(blob: bytes) -> Optional[int]:
    """`trkn` atom 資料：2 bytes 保留後接 16 位元 big-endian 曲目編號。"""
    if len(blob) < 4:
        return None
    (track,) = struct.unpack(">H", blob[2:4])
    return track or None


def format_bitrate(bits_per_second: Any) -> Optional[str]:
    try:
        value = int(float(bits_per_second))
    except (TypeError, ValueError):
        return None
    if value <= 0:
        return None
    return f"{value // 1000} kbps"


def format_frame_rate(rate: Any) -> Optional[str]:
    """接受 `30000/1001` 形式或數值。"""
    if rate is None:
        return None
    try:
        value = float(Fraction(str(rate)))
    except (ValueError, ZeroDivisionError):
        return None
    if value <= 0:
        return None
    return f"{value:.2f} fps"


def parse_track_number(value: Any) -> Optional[int]:
    """`3`、`"3/12"`、`(3, 12)` 或 trkn blob 皆可。"""
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return decode_itunes_track_number(bytes(value))
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        return parse_track_number(value[0])
    text = str(value).strip()
    if "/" in text:
        text = text.split("/", 1)[0]
    try:
        number = int(text)
    except ValueError:
        return None
    return number or None
