"""把系統屬性與格式專屬的部分結果合併成單一 ExtendedMetadata。"""

from __future__ import annotations

import dataclasses
from typing import Iterable, Optional

from ..models import ExtendedMetadata
from ..models.extended_metadata import is_empty_value
from ..utils.logger import get_logger
from .extractors.base import PartialMetadata

SYSTEM_FIELDS = ("system_attributes", "quarantine", "where_from_urls", "user_tags", "comment")


class MetadataMerger:
    """依來源優先序合併：排在前面的來源先寫入，後面的來源只補空缺。

    `merge(system, specific)` 中格式專屬結果優先於系統屬性，例如兩者都提供
    註解類欄位時以格式內的值為準。
    """

    def __init__(self, logger=None) -> None:
        self.logger = logger or get_logger(self.__class__.__name__)
        self._known = set(ExtendedMetadata.field_names())

    def combine(self, sources: Iterable[PartialMetadata]) -> ExtendedMetadata:
        values: dict[str, object] = {}
        for source in sources:
            for name, value in source.items():
                if name not in self._known:
                    self.logger.warning(f"忽略未知的 metadata 欄位: {name}")
                    continue
                if is_empty_value(value):
                    continue
                if name in values:
                    if values[name] != value:
                        self.logger.debug(f"欄位 {name} 已由較高優先來源提供，略過")
                    continue
                values[name] = value
        return ExtendedMetadata(**values)

    def merge(
        self, system: PartialMetadata, specific: Optional[PartialMetadata]
    ) -> ExtendedMetadata:
        return self.combine([specific or {}, system])

    def replace_system_fields(
        self, existing: ExtendedMetadata, system: PartialMetadata
    ) -> ExtendedMetadata:
        """以新的系統屬性結果取代舊值，格式專屬欄位保持不變。"""
        updates = {name: system.get(name) for name in SYSTEM_FIELDS}
        return dataclasses.replace(existing, **updates)
