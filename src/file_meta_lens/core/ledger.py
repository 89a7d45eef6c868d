"""本工具自己的註記帳本：編輯標記、版本、最後編輯時間與自訂欄位。

所有 key 都在保留前綴（預設 `com.mtdata.`）之下。自訂欄位以 JSON 陣列
`[{"key": ..., "value": ...}]` 儲存，保留順序，不儲存 id。
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..config import ConfigManager
from ..models import CustomField
from ..utils import time_utils
from ..utils.file_ops import OperationResult, safe_op
from ..utils.logger import get_logger

DEFAULT_TOOL_VERSION = "1.0"


@dataclass
class LedgerStamps:
    edited_by_tool: bool = False
    tool_version: str = DEFAULT_TOOL_VERSION
    last_edit_date: Optional[datetime] = None


def serialize_custom_fields(fields: list[CustomField]) -> bytes:
    payload = [item.to_dict() for item in fields]
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def deserialize_custom_fields(data: bytes) -> list[CustomField]:
    loaded = json.loads(data.decode("utf-8"))
    if not isinstance(loaded, list):
        raise ValueError("自訂欄位必須是 JSON 陣列")
    return [CustomField.from_dict(item) for item in loaded if isinstance(item, dict)]


class AnnotationLedger:
    def __init__(self, store, config: Optional[ConfigManager] = None, logger=None) -> None:
        self.store = store
        self.config = config or ConfigManager()
        self.logger = logger or get_logger(self.__class__.__name__)
        self.prefix = str(self.config.get("ledger.prefix", "com.mtdata."))
        self.tool_name = str(self.config.get("ledger.tool_name", "MTData for macOS"))
        self.tool_version = str(self.config.get("ledger.tool_version", "2.0"))

    @property
    def edited_by_key(self) -> str:
        return f"{self.prefix}editedby"

    @property
    def version_key(self) -> str:
        return f"{self.prefix}version"

    @property
    def last_edit_key(self) -> str:
        return f"{self.prefix}lastedit"

    @property
    def custom_fields_key(self) -> str:
        return f"{self.prefix}customfields"

    def _decoded(self, path: Path, key: str) -> Optional[str]:
        data = self.store.get(path, key)
        if data is None:
            return None
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return None

    def read_stamps(self, path: Path) -> LedgerStamps:
        stamps = LedgerStamps()
        # 只要編輯標記存在即視為已編輯，不檢查內容
        stamps.edited_by_tool = self.store.get(path, self.edited_by_key) is not None
        version = self._decoded(path, self.version_key)
        if version:
            stamps.tool_version = version
        last_edit = self._decoded(path, self.last_edit_key)
        if last_edit:
            stamps.last_edit_date = time_utils.parse_iso8601(last_edit)
        return stamps

    def read_custom_fields(self, path: Path) -> list[CustomField]:
        data = self.store.get(path, self.custom_fields_key)
        if data is None:
            return []
        try:
            return deserialize_custom_fields(data)
        except (UnicodeDecodeError, ValueError) as exc:
            self.logger.warning(f"無法解析自訂欄位: {path} ({exc})")
            return []

    def save(self, path: Path, fields: list[CustomField]) -> OperationResult:
        payload = serialize_custom_fields(fields)
        edited_at = time_utils.now_utc()

        @safe_op(config=self.config, logger=self.logger)
        def _write() -> datetime:
            self.store.set(path, self.edited_by_key, self.tool_name.encode("utf-8"))
            self.store.set(path, self.version_key, self.tool_version.encode("utf-8"))
            self.store.set(
                path, self.last_edit_key, time_utils.format_iso8601(edited_at).encode("utf-8")
            )
            self.store.set(path, self.custom_fields_key, payload)
            return edited_at

        result = _write()
        if result.success:
            self.logger.info(f"已儲存註記（{len(fields)} 個自訂欄位）: {path}")
        return result

    def remove_all(self, path: Path) -> OperationResult:
        @safe_op(config=self.config, logger=self.logger)
        def _remove() -> int:
            removed = 0
            for key in (
                self.edited_by_key,
                self.version_key,
                self.last_edit_key,
                self.custom_fields_key,
            ):
                self.store.remove(path, key)
                removed += 1
            for key in self.store.list_keys(path):
                if key.startswith(self.prefix):
                    self.store.remove(path, key)
                    removed += 1
            return removed

        result = _remove()
        if result.success:
            self.logger.info(f"已移除全部註記: {path}")
        return result
