"""設定檔案建立時間（birth time）。"""

from __future__ import annotations

import errno
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from .inspectors import CommandRunner


def set_creation_date(path: Path, moment: datetime, runner: Optional[CommandRunner] = None) -> None:
    """macOS 透過 SetFile 設定；其他平台沒有可寫入的建立時間，拋出 OSError。"""
    if sys.platform != "darwin":
        raise OSError(errno.ENOTSUP, "此平台不支援設定檔案建立時間")
    runner = runner or CommandRunner()
    local = moment.astimezone() if moment.tzinfo else moment
    completed = runner.run(["SetFile", "-d", local.strftime("%m/%d/%Y %H:%M:%S"), str(path)])
    if completed is None:
        raise OSError(errno.EIO, f"無法設定建立時間: {path}")
