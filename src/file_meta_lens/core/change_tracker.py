"""比較原始快照與工作副本，判斷哪些欄位變更、是否需要儲存。

判斷結果一律即時計算，不做快取：工作副本隨時可能被外部修改。
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..models import CustomField, FileMetadata


@dataclass
class ChangeSet:
    creation_date_changed: bool = False
    added_field_ids: list[str] = field(default_factory=list)
    removed_field_ids: list[str] = field(default_factory=list)
    edited_field_ids: list[str] = field(default_factory=list)

    @property
    def custom_fields_changed(self) -> bool:
        return bool(self.added_field_ids or self.removed_field_ids or self.edited_field_ids)

    @property
    def has_changes(self) -> bool:
        return self.creation_date_changed or self.custom_fields_changed


def _index(fields: list[CustomField]) -> dict[str, CustomField]:
    return {item.id: item for item in fields}


def has_changes(original: FileMetadata, current: FileMetadata) -> bool:
    if original.creation_date != current.creation_date:
        return True
    if len(original.custom_fields) != len(current.custom_fields):
        return True
    originals = _index(original.custom_fields)
    for item in current.custom_fields:
        counterpart = originals.get(item.id)
        if counterpart is None:
            return True
        if counterpart.key != item.key or counterpart.value != item.value:
            return True
    return False


def is_creation_date_modified(original: FileMetadata, current: FileMetadata) -> bool:
    return original.creation_date != current.creation_date


def is_custom_field_modified(item: CustomField, original: FileMetadata) -> bool:
    """沒有原始對應的新欄位一律視為已修改，即使內容為空。"""
    counterpart = original.find_custom_field(item.id)
    if counterpart is None:
        return True
    return counterpart.key != item.key or counterpart.value != item.value


def modified_field_ids(original: FileMetadata, current: FileMetadata) -> set[str]:
    return {item.id for item in current.custom_fields if is_custom_field_modified(item, original)}


def compute_changes(original: FileMetadata, current: FileMetadata) -> ChangeSet:
    originals = _index(original.custom_fields)
    current_ids = {item.id for item in current.custom_fields}
    changes = ChangeSet(creation_date_changed=is_creation_date_modified(original, current))
    for item in current.custom_fields:
        counterpart = originals.get(item.id)
        if counterpart is None:
            changes.added_field_ids.append(item.id)
        elif counterpart.key != item.key or counterpart.value != item.value:
            changes.edited_field_ids.append(item.id)
    changes.removed_field_ids = [
        item.id for item in original.custom_fields if item.id not in current_ids
    ]
    return changes
