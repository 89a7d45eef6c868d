"""單一檔案的 metadata 快照模型。"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from .custom_field import CustomField
from .extended_metadata import ExtendedMetadata
from .format_kind import FormatKind


@dataclass
class FileMetadata:
    path: Path
    name: str
    creation_date: Optional[datetime] = None
    modification_date: Optional[datetime] = None
    size: int = 0
    permissions: str = ""
    format_kind: FormatKind = FormatKind.UNKNOWN
    icon: Any = field(default=None, compare=False, repr=False)

    edited_by_tool: bool = False
    tool_version: str = "1.0"
    last_edit_date: Optional[datetime] = None

    custom_fields: list[CustomField] = field(default_factory=list)
    extended_metadata: ExtendedMetadata = field(default_factory=ExtendedMetadata)

    @classmethod
    def empty(cls, path: Path) -> "FileMetadata":
        return cls(path=path, name=path.name)

    def copy(self) -> "FileMetadata":
        """深複製快照；icon 為呈現用途，直接共用。"""
        icon = self.icon
        self.icon = None
        try:
            duplicated = copy.deepcopy(self)
        finally:
            self.icon = icon
        duplicated.icon = icon
        return duplicated

    def find_custom_field(self, field_id: str) -> Optional[CustomField]:
        for item in self.custom_fields:
            if item.id == field_id:
                return item
        return None

    def to_dict(self) -> dict[str, object]:
        return {
            "path": str(self.path),
            "name": self.name,
            "creation_date": self.creation_date.isoformat() if self.creation_date else None,
            "modification_date": (
                self.modification_date.isoformat() if self.modification_date else None
            ),
            "size": self.size,
            "permissions": self.permissions,
            "format_kind": self.format_kind.value,
            "edited_by_tool": self.edited_by_tool,
            "tool_version": self.tool_version,
            "last_edit_date": self.last_edit_date.isoformat() if self.last_edit_date else None,
            "custom_fields": [item.to_dict() for item in self.custom_fields],
            "extended_metadata": self.extended_metadata.to_dict(),
        }
