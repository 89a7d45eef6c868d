from datetime import datetime, timezone
from pathlib import Path

from file_meta_lens.core import change_tracker
from file_meta_lens.models import CustomField, FileMetadata


def _snapshot() -> FileMetadata:
    metadata = FileMetadata.empty(Path("/data/a.txt"))
    metadata.creation_date = datetime(2024, 1, 1, tzinfo=timezone.utc)
    metadata.custom_fields = [CustomField("status", "draft"), CustomField("owner", "lee")]
    return metadata


def test_no_changes_on_copy() -> None:
    original = _snapshot()
    current = original.copy()
    assert change_tracker.has_changes(original, current) is False
    assert change_tracker.modified_field_ids(original, current) == set()
    assert change_tracker.compute_changes(original, current).has_changes is False


def test_creation_date_change() -> None:
    original = _snapshot()
    current = original.copy()
    current.creation_date = datetime(2020, 6, 1, tzinfo=timezone.utc)

    assert change_tracker.has_changes(original, current) is True
    assert change_tracker.is_creation_date_modified(original, current) is True
    changes = change_tracker.compute_changes(original, current)
    assert changes.creation_date_changed is True
    assert changes.custom_fields_changed is False


def test_edited_field() -> None:
    original = _snapshot()
    current = original.copy()
    current.custom_fields[0].value = "final"

    assert change_tracker.has_changes(original, current) is True
    assert change_tracker.modified_field_ids(original, current) == {current.custom_fields[0].id}
    assert change_tracker.compute_changes(original, current).edited_field_ids == [
        current.custom_fields[0].id
    ]


def test_added_empty_field_is_modified() -> None:
    original = _snapshot()
    current = original.copy()
    blank = CustomField("", "")
    current.custom_fields.append(blank)

    assert change_tracker.has_changes(original, current) is True
    assert change_tracker.is_custom_field_modified(blank, original) is True
    assert change_tracker.compute_changes(original, current).added_field_ids == [blank.id]


def test_removed_field() -> None:
    original = _snapshot()
    current = original.copy()
    removed = current.custom_fields.pop()

    assert change_tracker.has_changes(original, current) is True
    assert change_tracker.compute_changes(original, current).removed_field_ids == [removed.id]


def test_same_content_different_identity_is_a_change() -> None:
    original = _snapshot()
    current = original.copy()
    current.custom_fields[1] = CustomField("owner", "lee")
    assert change_tracker.has_changes(original, current) is True


def test_predicates_follow_live_mutation() -> None:
    original = _snapshot()
    current = original.copy()
    field = current.custom_fields[0]

    field.key = "phase"
    assert change_tracker.is_custom_field_modified(field, original) is True
    field.key = "status"
    assert change_tracker.is_custom_field_modified(field, original) is False
