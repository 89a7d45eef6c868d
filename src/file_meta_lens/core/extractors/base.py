"""Extractor 共用的執行環境與部分結果工具。"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ...config import ConfigManager
from ...models.extended_metadata import is_empty_value
from ...utils.logger import get_logger
from ..inspectors import ArchiveInspector, CommandRunner, ExecutableInspector, MediaInspector

# extractor 回傳的部分結果：ExtendedMetadata 欄位名稱 -> 值
PartialMetadata = dict[str, Any]


@dataclass
class ExtractionContext:
    config: ConfigManager = field(default_factory=ConfigManager)
    logger: logging.Logger = field(default_factory=lambda: get_logger("Extractor"))
    archive_inspector: Optional[ArchiveInspector] = None
    executable_inspector: Optional[ExecutableInspector] = None
    media_inspector: Optional[MediaInspector] = None

    def __post_init__(self) -> None:
        runner = CommandRunner(self.config, self.logger)
        if self.archive_inspector is None:
            self.archive_inspector = ArchiveInspector(runner)
        if self.executable_inspector is None:
            self.executable_inspector = ExecutableInspector(runner)
        if self.media_inspector is None:
            self.media_inspector = MediaInspector(runner)


def put(result: PartialMetadata, name: str, value: Any) -> None:
    """只寫入非空值，取不到的欄位保持缺席。"""
    if not is_empty_value(value):
        result[name] = value
