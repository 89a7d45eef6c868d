"""兩階段讀取：快速的檔案與帳本資訊，以及延後計算的延伸 metadata。"""

from __future__ import annotations

import os
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from ..config import ConfigManager
from ..models import ExtendedMetadata, FileMetadata, FormatKind
from ..utils import time_utils
from ..utils.file_classifier import classify_file_type
from ..utils.file_ops import OperationResult
from ..utils.logger import get_logger
from .extractors import ExtractionContext, extractor_for
from .ledger import AnnotationLedger
from .merger import MetadataMerger
from .system_attributes import SystemAttributesExtractor


def permission_string(mode: int) -> str:
    return format(mode & 0o7777, "o")


def creation_timestamp(stat: os.stat_result) -> float:
    birth_time = getattr(stat, "st_birthtime", None)
    if birth_time is not None:
        return birth_time
    # Windows 以外的 st_ctime 是 inode 變更時間，不是建立時間
    if sys.platform == "win32":
        return stat.st_ctime
    return stat.st_mtime


class MetadataLoader:
    def __init__(
        self,
        store,
        config: Optional[ConfigManager] = None,
        logger=None,
        context: Optional[ExtractionContext] = None,
    ) -> None:
        self.store = store
        self.config = config or ConfigManager()
        self.logger = logger or get_logger(self.__class__.__name__)
        self.context = context or ExtractionContext(config=self.config, logger=self.logger)
        self.ledger = AnnotationLedger(store, self.config, self.logger)
        self.system_extractor = SystemAttributesExtractor(store, self.logger)
        self.merger = MetadataMerger(self.logger)

    def read_metadata(self, path: Path) -> OperationResult:
        """第一階段：身分、權限、帳本標記與自訂欄位。value 為 FileMetadata。"""
        try:
            stat = path.stat()
        except OSError as exc:
            self.logger.warning(f"無法讀取檔案資訊: {path} ({exc})")
            return OperationResult.failed(str(exc))
        if not path.is_file():
            return OperationResult.failed(f"不是一般檔案: {path}")

        metadata = FileMetadata.empty(path)
        metadata.creation_date = time_utils.from_timestamp(creation_timestamp(stat))
        metadata.modification_date = time_utils.from_timestamp(stat.st_mtime)
        metadata.size = stat.st_size
        metadata.permissions = permission_string(stat.st_mode)
        metadata.format_kind = classify_file_type(path, self.config, self.logger)

        stamps = self.ledger.read_stamps(path)
        metadata.edited_by_tool = stamps.edited_by_tool
        metadata.tool_version = stamps.tool_version
        metadata.last_edit_date = stamps.last_edit_date
        metadata.custom_fields = self.ledger.read_custom_fields(path)
        return OperationResult.ok(metadata)

    def load_extended_metadata(
        self, path: Path, kind: Optional[FormatKind] = None
    ) -> ExtendedMetadata:
        """第二階段：不會拋出例外，取不到的欄位保持缺席。"""
        if kind is None:
            kind = classify_file_type(path, self.config, self.logger)

        extractor = extractor_for(kind)
        # 系統屬性與格式專屬擷取互不相依，同時執行
        with ThreadPoolExecutor(max_workers=2) as executor:
            system_future = executor.submit(self.system_extractor.extract, path)
            specific_future = (
                executor.submit(extractor, path, self.context) if extractor is not None else None
            )

            try:
                system = system_future.result()
            except Exception as exc:
                self.logger.warning(f"系統屬性讀取失敗: {path} ({exc})")
                system = {}

            specific = None
            if specific_future is not None:
                try:
                    specific = specific_future.result()
                except Exception as exc:
                    self.logger.warning(f"{kind.value} metadata 擷取失敗: {path} ({exc})")
        return self.merger.merge(system, specific)

    def read_system_fields(self, path: Path) -> dict:
        return self.system_extractor.extract(path)
