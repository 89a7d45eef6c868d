"""以延伸屬性（xattr）為後端的 key/value 儲存。"""

from __future__ import annotations

import errno
import sys
from pathlib import Path
from typing import Optional

import xattr

from ..config import ConfigManager
from ..utils.logger import get_logger

_MISSING_ATTRIBUTE_ERRNOS = {
    errno.ENODATA,
    getattr(errno, "ENOATTR", errno.ENODATA),
}


class XattrAttributeStore:
    """綁定作業系統延伸屬性的 CRUD，不含任何格式知識。

    Linux 只允許 `user.` 命名空間下的自訂屬性，因此在 Linux 上 key 會自動
    加上命名空間前綴，列出時再去除。macOS 直接使用原始 key。
    """

    def __init__(self, config: Optional[ConfigManager] = None, logger=None) -> None:
        self.config = config or ConfigManager()
        self.logger = logger or get_logger(self.__class__.__name__)
        if sys.platform.startswith("linux"):
            self.namespace = str(self.config.get("attributes.linux_namespace", "user."))
        else:
            self.namespace = ""

    def _native(self, key: str) -> str:
        return f"{self.namespace}{key}"

    def get(self, path: Path, key: str) -> Optional[bytes]:
        try:
            return xattr.getxattr(str(path), self._native(key))
        except OSError as exc:
            if exc.errno not in _MISSING_ATTRIBUTE_ERRNOS:
                self.logger.debug(f"無法讀取屬性 {key}: {path} ({exc})")
            return None

    def set(self, path: Path, key: str, value: bytes) -> None:
        xattr.setxattr(str(path), self._native(key), value)

    def remove(self, path: Path, key: str) -> None:
        try:
            xattr.removexattr(str(path), self._native(key))
        except OSError as exc:
            if exc.errno in _MISSING_ATTRIBUTE_ERRNOS:
                return
            raise

    def list_keys(self, path: Path) -> list[str]:
        try:
            names = xattr.listxattr(str(path))
        except OSError as exc:
            self.logger.debug(f"無法列出屬性: {path} ({exc})")
            return []
        keys: list[str] = []
        for name in names:
            if self.namespace:
                if not name.startswith(self.namespace):
                    continue
                name = name[len(self.namespace) :]
            keys.append(name)
        return keys
