"""時間戳處理工具。"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Optional

# quarantine 時間戳以 2001-01-01 UTC 為基準
REFERENCE_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)

_EXIF_FORMAT = "%Y:%m:%d %H:%M:%S"
_ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def parse_exif_datetime(value: str) -> Optional[datetime]:
    try:
        return datetime.strptime(value.strip().rstrip("\x00"), _EXIF_FORMAT)
    except ValueError:
        return None


def from_reference_seconds(value: str) -> Optional[datetime]:
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(seconds):
        return None
    try:
        return REFERENCE_EPOCH + timedelta(seconds=seconds)
    except OverflowError:
        return None


def to_reference_seconds(moment: datetime) -> float:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - REFERENCE_EPOCH).total_seconds()


def format_iso8601(moment: datetime) -> str:
    """固定格式 `YYYY-MM-DDTHH:MM:SSZ`（UTC）。"""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.astimezone(timezone.utc).strftime(_ISO_FORMAT)


def parse_iso8601(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.strptime(value.strip(), _ISO_FORMAT)
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)


def parse_pdf_date(value: str) -> Optional[datetime]:
    """解析 PDF `D:YYYYMMDDHHmmSS` 日期，時區部分忽略。"""
    text = value.strip()
    if text.startswith("D:"):
        text = text[2:]
    digits = ""
    for char in text:
        if not char.isdigit():
            break
        digits += char
    for width, fmt in ((14, "%Y%m%d%H%M%S"), (12, "%Y%m%d%H%M"), (8, "%Y%m%d"), (4, "%Y")):
        if len(digits) >= width:
            try:
                return datetime.strptime(digits[:width], fmt)
            except ValueError:
                return None
    return None


def from_timestamp(value: Optional[float]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


def now_utc() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)
