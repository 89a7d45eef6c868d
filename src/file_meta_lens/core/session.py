"""單一檔案的編輯工作階段：原始快照與工作副本。

`original` 只在讀取與成功儲存時更新，使用者操作只改 `current`。
延伸 metadata 延後到第一次要求時才在背景擷取，同一時間最多一個擷取工作。
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..config import ConfigManager
from ..models import CustomField, ExtendedMetadata, FileMetadata
from ..utils.file_ops import OperationResult, safe_op
from ..utils.logger import get_logger
from . import change_tracker
from .file_times import set_creation_date
from .inspectors import CommandRunner
from .loader import MetadataLoader
from .system_attributes import SystemAttributesEditor

NOT_LOADED = "尚未載入檔案"
SESSION_CLOSED = "工作階段已關閉"


class MetadataSession:
    def __init__(
        self,
        store,
        config: Optional[ConfigManager] = None,
        logger=None,
        loader: Optional[MetadataLoader] = None,
    ) -> None:
        self.store = store
        self.config = config or ConfigManager()
        self.logger = logger or get_logger(self.__class__.__name__)
        self.loader = loader or MetadataLoader(store, self.config, self.logger)
        self.editor = SystemAttributesEditor(store, self.config, self.logger)
        self.original: Optional[FileMetadata] = None
        self.current: Optional[FileMetadata] = None
        self.extended_loaded = False
        self._lock = threading.Lock()
        self._extracting = False
        self._generation = 0
        self._pending: Optional[Future] = None
        self._closed = False
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="extract")

    @property
    def is_extracting(self) -> bool:
        return self._extracting

    def _require_loaded(self) -> FileMetadata:
        if self.current is None or self.original is None:
            raise RuntimeError(NOT_LOADED)
        return self.current

    # 讀取 --------------------------------------------------------------

    def load(self, path: Path) -> OperationResult:
        if self._closed:
            return OperationResult.failed(SESSION_CLOSED)
        result = self.loader.read_metadata(path)
        if not result.success:
            return result
        metadata: FileMetadata = result.value
        with self._lock:
            if self._closed:
                return OperationResult.failed(SESSION_CLOSED)
            self._generation += 1
            self.original = metadata
            self.current = metadata.copy()
            self.extended_loaded = False
        self.logger.info(f"已載入: {path}")
        return result

    def reload(self) -> OperationResult:
        current = self._require_loaded()
        was_loaded = self.extended_loaded
        result = self.load(current.path)
        if result.success and was_loaded:
            self.request_extended_metadata()
        return result

    def close(self) -> None:
        """關閉後不再接受載入或擷取。"""
        with self._lock:
            self._closed = True
            self._generation += 1
            self.original = None
            self.current = None
            self.extended_loaded = False
        self._executor.shutdown(wait=False)

    def request_extended_metadata(self) -> Optional[Future]:
        """在背景擷取延伸 metadata；擷取進行中時再次要求不做任何事並回傳 None。

        回傳的 Future 完成時，結果已套用到兩份快照。
        """
        with self._lock:
            if self._closed or self._extracting or self.original is None:
                return None
            generation = self._generation
            path = self.original.path
            kind = self.original.format_kind
            self._pending = self._executor.submit(self._extract, path, kind, generation)
            self._extracting = True
            return self._pending

    def ensure_extended_metadata(self) -> Optional[Future]:
        if self.extended_loaded:
            return None
        return self.request_extended_metadata()

    def wait_for_extended_metadata(self) -> Optional[ExtendedMetadata]:
        self.ensure_extended_metadata()
        future = self._pending
        if future is not None:
            future.result()
        return self.current.extended_metadata if self.current is not None else None

    def _extract(self, path: Path, kind, generation: int) -> Optional[ExtendedMetadata]:
        try:
            extended = self.loader.load_extended_metadata(path, kind)
        except Exception as exc:
            self.logger.warning(f"延伸 metadata 擷取失敗: {path} ({exc})")
            extended = None
        with self._lock:
            self._extracting = False
            # 擷取期間重新載入或關閉時，舊結果直接丟棄
            if extended is None or generation != self._generation or self.original is None:
                return None
            self.original.extended_metadata = extended
            if self.current is not None:
                self.current.extended_metadata = extended
            self.extended_loaded = True
        return extended

    # 編輯 --------------------------------------------------------------

    def add_custom_field(self, key: str = "", value: str = "") -> CustomField:
        current = self._require_loaded()
        item = CustomField(key=key, value=value)
        current.custom_fields.append(item)
        return item

    def update_custom_field(
        self, field_id: str, key: Optional[str] = None, value: Optional[str] = None
    ) -> bool:
        item = self._require_loaded().find_custom_field(field_id)
        if item is None:
            return False
        if key is not None:
            item.key = key
        if value is not None:
            item.value = value
        return True

    def remove_custom_field(self, field_id: str) -> bool:
        current = self._require_loaded()
        before = len(current.custom_fields)
        current.custom_fields = [item for item in current.custom_fields if item.id != field_id]
        return len(current.custom_fields) != before

    def set_creation_date(self, moment: Optional[datetime]) -> None:
        self._require_loaded().creation_date = moment

    def revert(self) -> None:
        self._require_loaded()
        self.current = self.original.copy()

    # 變更判斷 ----------------------------------------------------------

    def has_changes(self) -> bool:
        if self.original is None or self.current is None:
            return False
        return change_tracker.has_changes(self.original, self.current)

    def is_creation_date_modified(self) -> bool:
        current = self._require_loaded()
        return change_tracker.is_creation_date_modified(self.original, current)

    def is_field_modified(self, field_id: str) -> bool:
        item = self._require_loaded().find_custom_field(field_id)
        if item is None:
            return False
        return change_tracker.is_custom_field_modified(item, self.original)

    def modified_field_ids(self) -> set[str]:
        current = self._require_loaded()
        return change_tracker.modified_field_ids(self.original, current)

    # 儲存與移除 --------------------------------------------------------

    def save(self) -> OperationResult:
        if self.current is None:
            return OperationResult.failed(NOT_LOADED)
        current = self.current
        changes = change_tracker.compute_changes(self.original, current)
        if not changes.has_changes:
            return OperationResult.ok("UNCHANGED")

        if changes.creation_date_changed and current.creation_date is not None:
            runner = CommandRunner(self.config, self.logger)

            @safe_op(config=self.config, max_retries=0, logger=self.logger)
            def _apply_creation_date() -> None:
                set_creation_date(current.path, current.creation_date, runner)

            date_result = _apply_creation_date()
            if not date_result.success:
                return date_result

        result = self.loader.ledger.save(current.path, current.custom_fields)
        if not result.success:
            return result

        current.edited_by_tool = True
        current.tool_version = self.loader.ledger.tool_version
        current.last_edit_date = result.value
        self.original = current.copy()
        return result

    def remove_all_metadata(self) -> OperationResult:
        if self.current is None:
            return OperationResult.failed(NOT_LOADED)
        current = self.current
        result = self.loader.ledger.remove_all(current.path)
        if not result.success:
            return result
        for snapshot in (self.original, self.current):
            snapshot.edited_by_tool = False
            snapshot.tool_version = "1.0"
            snapshot.last_edit_date = None
            snapshot.custom_fields = []
        self._refresh_system_fields()
        return result

    def remove_quarantine(self) -> OperationResult:
        return self._system_edit(self.editor.remove_quarantine)

    def update_user_tags(self, tags: list[str]) -> OperationResult:
        return self._system_edit(self.editor.update_user_tags, tags)

    def update_comment(self, comment: str) -> OperationResult:
        return self._system_edit(self.editor.update_comment, comment)

    def update_where_from_urls(self, urls: list[str]) -> OperationResult:
        return self._system_edit(self.editor.update_where_from_urls, urls)

    def _system_edit(self, action, *args) -> OperationResult:
        if self.current is None:
            return OperationResult.failed(NOT_LOADED)
        current = self.current
        result = action(current.path, *args)
        if result.success:
            self._refresh_system_fields()
        return result

    def _refresh_system_fields(self) -> None:
        if not self.extended_loaded or self.original is None:
            return
        system = self.loader.read_system_fields(self.original.path)
        merger = self.loader.merger
        with self._lock:
            refreshed = merger.replace_system_fields(self.original.extended_metadata, system)
            self.original.extended_metadata = refreshed
            if self.current is not None:
                self.current.extended_metadata = refreshed
