"""影像 metadata 讀取與格式化工具。"""

from __future__ import annotations

import math
from typing import Any, Optional

_ORIENTATION_LABELS = {
    1: "Normal",
    2: "Mirrored horizontal",
    3: "Rotated 180°",
    4: "Mirrored vertical",
    5: "Mirrored horizontal, rotated 270° CW",
    6: "Rotated 90° CW",
    7: "Mirrored horizontal, rotated 90° CW",
    8: "Rotated 270° CW",
}


def register_heif_opener() -> None:
    try:
        from pillow_heif import register_heif_opener as _register

        _register()
    except ImportError:
        return


def to_float(value: Any) -> Optional[float]:
    """IFDRational、(num, den) tuple 或數字轉成 float。"""
    if value is None:
        return None
    if isinstance(value, tuple) and len(value) == 2:
        numerator, denominator = value
        try:
            if float(denominator) == 0:
                return None
            return float(numerator) / float(denominator)
        except (TypeError, ValueError):
            return None
    try:
        result = float(value)
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def decode_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        text = value.decode("utf-8", errors="ignore")
    else:
        text = str(value)
    text = text.strip().rstrip("\x00").strip()
    return text or None


def orientation_label(code: Any) -> Optional[str]:
    try:
        return _ORIENTATION_LABELS.get(int(code))
    except (TypeError, ValueError):
        return None


def aperture_from_apex(apex: float) -> float:
    return 2 ** (apex / 2)


def format_aperture(f_number: float) -> str:
    return f"f/{f_number:.1f}"


def format_shutter_speed(exposure_time: float) -> Optional[str]:
    """小於 1 秒顯示為 `1/x`，否則顯示一位小數的秒數。"""
    if exposure_time <= 0:
        return None
    if exposure_time < 1:
        denominator = round(1 / exposure_time)
        # 接近 1 秒時 1/x 會變成 1/1，改顯示秒數
        if denominator > 1:
            return f"1/{denominator}"
    return f"{exposure_time:.1f}s"


def dms_to_degrees(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, (tuple, list)):
        parts = [to_float(item) for item in value]
        if not parts or any(part is None for part in parts):
            return None
        degrees = parts[0]
        minutes = parts[1] if len(parts) > 1 else 0.0
        seconds = parts[2] if len(parts) > 2 else 0.0
        return degrees + minutes / 60 + seconds / 3600
    return to_float(value)


def format_gps_coordinate(degrees: float, reference: Optional[str]) -> str:
    text = f"{abs(degrees):.6f}°"
    if reference:
        return f"{text} {reference}"
    return text


def format_gps_altitude(altitude: float, reference: Any) -> str:
    below_sea_level = reference in (1, b"\x01", "1")
    if below_sea_level:
        return f"{altitude:.1f} m below sea level"
    return f"{altitude:.1f} m"
