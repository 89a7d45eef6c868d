"""系統層級的來源資訊：隔離標記、下載來源、使用者標籤與註解。

與檔案格式無關，對每個檔案都會執行。缺少的屬性直接省略，不視為錯誤。
"""

from __future__ import annotations

import plistlib
from pathlib import Path
from typing import Any, Optional
from xml.parsers.expat import ExpatError

from ..config import ConfigManager
from ..models import QuarantineInfo
from ..utils.file_ops import OperationResult, safe_op
from ..utils.logger import get_logger
from .extractors.base import PartialMetadata, put

QUARANTINE_KEY = "com.apple.quarantine"
WHERE_FROMS_KEY = "com.apple.metadata:kMDItemWhereFroms"
USER_TAGS_KEY = "com.apple.metadata:_kMDItemUserTags"
COMMENT_KEY = "com.apple.metadata:kMDItemFinderComment"

BINARY_PLACEHOLDER = "<binary data>"


def _load_plist(data: bytes) -> Any:
    try:
        return plistlib.loads(data)
    except (plistlib.InvalidFileException, ExpatError, ValueError, TypeError, OverflowError):
        return None


def decode_where_froms(data: bytes) -> Optional[list[str]]:
    """二進位 plist 的字串清單；無法解析時當成單一 UTF-8 字串。"""
    loaded = _load_plist(data)
    if loaded is None:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            return None
        return [text] if text else None
    if isinstance(loaded, list):
        return [str(item) for item in loaded if str(item)]
    return None


def decode_user_tags(data: bytes) -> list[str]:
    loaded = _load_plist(data)
    if not isinstance(loaded, list):
        return []
    # 每個項目為 "名稱\n顏色代碼"
    return [str(item).split("\n", 1)[0] for item in loaded if str(item).strip()]


def decode_comment(data: bytes) -> Optional[str]:
    loaded = _load_plist(data)
    if isinstance(loaded, str):
        return loaded or None
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return None
    return text or None


class SystemAttributesExtractor:
    def __init__(self, store, logger=None) -> None:
        self.store = store
        self.logger = logger or get_logger(self.__class__.__name__)

    def read_all_attributes(self, path: Path) -> dict[str, str]:
        attributes: dict[str, str] = {}
        for key in self.store.list_keys(path):
            value = self.store.get(path, key)
            if value is None:
                continue
            try:
                attributes[key] = value.decode("utf-8")
            except UnicodeDecodeError:
                attributes[key] = BINARY_PLACEHOLDER
        return attributes

    def read_quarantine(self, path: Path) -> Optional[QuarantineInfo]:
        data = self.store.get(path, QUARANTINE_KEY)
        if data is None:
            return None
        try:
            raw = data.decode("utf-8")
        except UnicodeDecodeError:
            self.logger.debug(f"quarantine 屬性不是 UTF-8 文字: {path}")
            return None
        return QuarantineInfo.parse(raw)

    def read_where_from_urls(self, path: Path) -> Optional[list[str]]:
        data = self.store.get(path, WHERE_FROMS_KEY)
        if data is None:
            return None
        return decode_where_froms(data)

    def read_user_tags(self, path: Path) -> list[str]:
        data = self.store.get(path, USER_TAGS_KEY)
        if data is None:
            return []
        return decode_user_tags(data)

    def read_comment(self, path: Path) -> Optional[str]:
        data = self.store.get(path, COMMENT_KEY)
        if data is None:
            return None
        return decode_comment(data)

    def extract(self, path: Path) -> PartialMetadata:
        result: PartialMetadata = {}
        put(result, "system_attributes", self.read_all_attributes(path))
        put(result, "quarantine", self.read_quarantine(path))
        put(result, "where_from_urls", self.read_where_from_urls(path))
        put(result, "user_tags", self.read_user_tags(path))
        put(result, "comment", self.read_comment(path))
        return result


class SystemAttributesEditor:
    """系統屬性的寫入操作，全部回傳 OperationResult。"""

    def __init__(self, store, config: Optional[ConfigManager] = None, logger=None) -> None:
        self.store = store
        self.config = config or ConfigManager()
        self.logger = logger or get_logger(self.__class__.__name__)

    def _run(self, action) -> OperationResult:
        return safe_op(config=self.config, logger=self.logger)(action)()

    def remove_quarantine(self, path: Path) -> OperationResult:
        def _remove() -> None:
            self.store.remove(path, QUARANTINE_KEY)

        result = self._run(_remove)
        if result.success:
            self.logger.info(f"已移除 quarantine 標記: {path}")
        return result

    def update_user_tags(self, path: Path, tags: list[str]) -> OperationResult:
        cleaned = [tag.strip() for tag in tags if tag.strip()]

        def _write() -> None:
            if not cleaned:
                self.store.remove(path, USER_TAGS_KEY)
                return
            self.store.set(path, USER_TAGS_KEY, plistlib.dumps(cleaned, fmt=plistlib.FMT_BINARY))

        return self._run(_write)

    def update_comment(self, path: Path, comment: str) -> OperationResult:
        def _write() -> None:
            self.store.set(path, COMMENT_KEY, comment.encode("utf-8"))

        return self._run(_write)

    def update_where_from_urls(self, path: Path, urls: list[str]) -> OperationResult:
        def _write() -> None:
            if not urls:
                self.store.remove(path, WHERE_FROMS_KEY)
                return
            self.store.set(path, WHERE_FROMS_KEY, plistlib.dumps(list(urls), fmt=plistlib.FMT_BINARY))

        return self._run(_write)
