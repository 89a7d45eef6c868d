"""使用者自訂欄位。"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field


def _new_field_id() -> str:
    return uuid.uuid4().hex


@dataclass
class CustomField:
    """`id` 只用於配對，比較內容時只看 key 與 value。"""

    key: str
    value: str
    id: str = field(default_factory=_new_field_id, compare=False)

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "CustomField":
        return cls(key=str(data.get("key", "")), value=str(data.get("value", "")))
