"""下載隔離標記（quarantine）資料模型。"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..utils import time_utils


@dataclass(frozen=True)
class QuarantineInfo:
    flags: Optional[str] = None
    timestamp: Optional[datetime] = None
    agent_name: Optional[str] = None
    downloaded_from: Optional[str] = None

    @classmethod
    def parse(cls, raw: str) -> "QuarantineInfo":
        """解析 `flags;timestamp;agent;origin`，欄位不足時保持為 None。"""
        components = raw.split(";")
        flags = components[0] if len(components) > 0 else None
        timestamp = None
        if len(components) > 1:
            timestamp = time_utils.from_reference_seconds(components[1])
        agent_name = components[2] if len(components) > 2 else None
        downloaded_from = components[3] if len(components) > 3 else None
        return cls(
            flags=flags,
            timestamp=timestamp,
            agent_name=agent_name,
            downloaded_from=downloaded_from,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "flags": self.flags,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "agent_name": self.agent_name,
            "downloaded_from": self.downloaded_from,
        }
