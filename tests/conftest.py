from __future__ import annotations

import errno
from pathlib import Path
from typing import Optional

import pytest

from file_meta_lens.config import ConfigManager
from file_meta_lens.core.extractors import ExtractionContext


class MemoryAttributeStore:
    """以 dict 模擬延伸屬性，可指定寫入失敗。"""

    def __init__(self) -> None:
        self.data: dict[str, dict[str, bytes]] = {}
        self.fail_writes = False

    def _bucket(self, path: Path) -> dict[str, bytes]:
        return self.data.setdefault(str(path), {})

    def get(self, path: Path, key: str) -> Optional[bytes]:
        return self._bucket(path).get(key)

    def set(self, path: Path, key: str, value: bytes) -> None:
        if self.fail_writes:
            raise OSError(errno.EACCES, "Permission denied")
        self._bucket(path)[key] = value

    def remove(self, path: Path, key: str) -> None:
        if self.fail_writes:
            raise OSError(errno.EACCES, "Permission denied")
        self._bucket(path).pop(key, None)

    def list_keys(self, path: Path) -> list[str]:
        return list(self._bucket(path).keys())


class FakeArchiveInspector:
    def __init__(self, count: Optional[int] = None) -> None:
        self.count = count
        self.calls: list[tuple[Path, str]] = []

    def count_entries(self, path: Path, archive_format: str) -> Optional[int]:
        self.calls.append((path, archive_format))
        return self.count


class FakeExecutableInspector:
    def __init__(self, archs=None, signed=None, authority=None) -> None:
        self.archs = archs
        self.signed = signed
        self.authority = authority
        self.universal_flags: list[bool] = []

    def architectures(self, path: Path, universal: bool):
        self.universal_flags.append(universal)
        return self.archs

    def signing_status(self, path: Path):
        return self.signed, self.authority


class FakeMediaInspector:
    def __init__(self, probe: Optional[dict] = None) -> None:
        self.result = probe
        self.calls: list[Path] = []

    def probe(self, path: Path) -> Optional[dict]:
        self.calls.append(path)
        return self.result


class FakeCompleted:
    def __init__(self, stdout: str = "", stderr: str = "", returncode: int = 0) -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode


class FakeRunner:
    """依指令名稱回傳預先設定的輸出；未設定的指令視為不存在。"""

    def __init__(self, outputs: Optional[dict[str, FakeCompleted]] = None) -> None:
        self.outputs = outputs or {}
        self.calls: list[list[str]] = []

    def run(self, args, *, allow_failure: bool = False):
        self.calls.append(list(args))
        completed = self.outputs.get(args[0])
        if completed is None:
            return None
        if completed.returncode != 0 and not allow_failure:
            return None
        return completed


@pytest.fixture
def config() -> ConfigManager:
    config = ConfigManager()
    config.set("retry.backoff_base_sec", 0.001)
    config.set("retry.backoff_cap_sec", 0.001)
    return config


@pytest.fixture
def store() -> MemoryAttributeStore:
    return MemoryAttributeStore()


@pytest.fixture
def context(config: ConfigManager) -> ExtractionContext:
    return ExtractionContext(
        config=config,
        archive_inspector=FakeArchiveInspector(),
        executable_inspector=FakeExecutableInspector(),
        media_inspector=FakeMediaInspector(),
    )
