"""外部檢查工具的介面（封存列表、執行檔檢查、影音探測）。

測試時可替換成假的 inspector，避免真的呼叫外部程式。
"""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from ..config import ConfigManager
from ..utils.logger import get_logger

KNOWN_ARCHITECTURES = ("x86_64h", "x86_64", "arm64e", "arm64", "i386", "armv7s", "armv7", "ppc64", "ppc")


class CommandRunner:
    """執行外部指令；工具不存在、逾時或失敗時回傳 None。"""

    def __init__(self, config: Optional[ConfigManager] = None, logger=None) -> None:
        config = config or ConfigManager()
        self.timeout = float(config.get("extraction.command_timeout_sec", 30.0))
        self.logger = logger or get_logger(self.__class__.__name__)

    def run(
        self, args: Sequence[str], *, allow_failure: bool = False
    ) -> Optional[subprocess.CompletedProcess]:
        if shutil.which(args[0]) is None:
            self.logger.debug(f"找不到外部工具: {args[0]}")
            return None
        try:
            completed = subprocess.run(
                list(args),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            self.logger.warning(f"外部工具逾時 ({self.timeout}s): {' '.join(args)}")
            return None
        except OSError as exc:
            self.logger.warning(f"無法執行外部工具 {args[0]}: {exc}")
            return None
        if completed.returncode != 0 and not allow_failure:
            self.logger.debug(f"外部工具回傳 {completed.returncode}: {' '.join(args)}")
            return None
        return completed


class ArchiveInspector:
    def __init__(self, runner: Optional[CommandRunner] = None) -> None:
        self.runner = runner or CommandRunner()

    def count_entries(self, path: Path, archive_format: str) -> Optional[int]:
        if archive_format == "ZIP":
            return self._count_zip(path)
        if archive_format.startswith("TAR"):
            return self._count_tar(path)
        return None

    def _count_zip(self, path: Path) -> Optional[int]:
        completed = self.runner.run(["unzip", "-t", str(path)])
        if completed is None:
            return None
        count = 0
        for line in completed.stdout.splitlines():
            stripped = line.strip()
            if not stripped.startswith("testing:"):
                continue
            entry = stripped[len("testing:") :].strip()
            entry = entry.rsplit(" ", 1)[0].strip() if entry.endswith("OK") else entry
            if entry.endswith("/"):
                continue
            count += 1
        return count

    def _count_tar(self, path: Path) -> Optional[int]:
        completed = self.runner.run(["tar", "-tf", str(path)])
        if completed is None:
            return None
        return sum(
            1 for line in completed.stdout.splitlines() if line.strip() and not line.endswith("/")
        )


class ExecutableInspector:
    def __init__(self, runner: Optional[CommandRunner] = None) -> None:
        self.runner = runner or CommandRunner()

    def architectures(self, path: Path, universal: bool) -> Optional[list[str]]:
        if universal:
            completed = self.runner.run(["lipo", "-archs", str(path)])
            if completed is None:
                return None
            archs = completed.stdout.split()
            return archs or None

        completed = self.runner.run(["file", "-b", str(path)])
        if completed is None:
            return None
        found: list[str] = []
        for token in completed.stdout.replace(",", " ").split():
            if token in KNOWN_ARCHITECTURES and token not in found:
                found.append(token)
        return found or None

    def signing_status(self, path: Path) -> tuple[Optional[bool], Optional[str]]:
        completed = self.runner.run(
            ["codesign", "-dv", "--verbose=2", str(path)], allow_failure=True
        )
        if completed is None:
            return None, None
        if completed.returncode != 0:
            return False, None
        authority = None
        for line in completed.stderr.splitlines():
            if line.startswith("Authority="):
                authority = line.split("=", 1)[1].strip()
                break
        return True, authority


class MediaInspector:
    """以 ffprobe 讀取容器與軌道資訊；逾時時由 subprocess 終止子程序。"""

    def __init__(self, runner: Optional[CommandRunner] = None, logger=None) -> None:
        self.runner = runner or CommandRunner()
        self.logger = logger or get_logger(self.__class__.__name__)

    def probe(self, path: Path) -> Optional[dict]:
        completed = self.runner.run(
            ["ffprobe", "-v", "error", "-show_format", "-show_streams", "-of", "json", str(path)]
        )
        if completed is None:
            return None
        try:
            loaded = json.loads(completed.stdout)
        except ValueError as exc:
            self.logger.warning(f"ffprobe 輸出無法解析: {path} ({exc})")
            return None
        return loaded if isinstance(loaded, dict) else None
