"""設定管理器。"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Optional

from . import defaults
from .schema import validate_config


def _merged(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = _merged(current, value)
        else:
            result[key] = value
    return result


def _lookup(config: dict[str, Any], dotted_key: str, default: Any = None) -> Any:
    node: Any = config
    for part in dotted_key.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node


def _assign(config: dict[str, Any], dotted_key: str, value: Any) -> None:
    *parents, leaf = dotted_key.split(".")
    node = config
    for part in parents:
        node = node.setdefault(part, {})
    node[leaf] = value


class ConfigManager:
    """三層設定：內建預設、使用者 JSON、執行期覆寫（後者優先）。"""

    def __init__(self, user_config_path: Optional[Path] = None) -> None:
        self._defaults = copy.deepcopy(defaults.DEFAULT_CONFIG)
        self._user = self._read_user_file(user_config_path) if user_config_path else {}
        self._runtime: dict[str, Any] = {}
        self._rebuild()

    @staticmethod
    def _read_user_file(path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        loaded = json.loads(path.read_text(encoding="utf-8"))
        return loaded if isinstance(loaded, dict) else {}

    def _rebuild(self) -> None:
        self._config = _merged(_merged(self._defaults, self._user), self._runtime)
        # 副檔名 -> 類別名稱；同一副檔名出現在多個類別時以先列出者為準
        self._extension_index: dict[str, str] = {}
        table = self._config.get("file_extensions") or {}
        if isinstance(table, dict):
            for kind_name, extensions in table.items():
                for extension in extensions or []:
                    self._extension_index.setdefault(str(extension).lower(), kind_name)

    def get(self, key: str, default: Any = None) -> Any:
        return _lookup(self._config, key, default)

    def set(self, key: str, value: Any) -> None:
        _assign(self._runtime, key, value)
        self._rebuild()

    def extensions_for(self, kind_name: str) -> set[str]:
        return {ext for ext, owner in self._extension_index.items() if owner == kind_name}

    def kind_name_for_extension(self, extension: str) -> Optional[str]:
        return self._extension_index.get(extension.lower())

    def validate_config(self) -> list[str]:
        return validate_config(self._config)

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._config)

    def save_user_config(self, path: Path) -> None:
        """只寫出使用者層與執行期覆寫，不含內建預設。"""
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = _merged(self._user, self._runtime)
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
