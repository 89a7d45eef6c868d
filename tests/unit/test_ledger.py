import json
from pathlib import Path

from file_meta_lens.core.ledger import (
    AnnotationLedger,
    deserialize_custom_fields,
    serialize_custom_fields,
)
from file_meta_lens.models import CustomField
from file_meta_lens.utils import time_utils

TARGET = Path("/data/notes.txt")


def test_custom_fields_serialization_keeps_order() -> None:
    fields = [CustomField("b", "2"), CustomField("a", "1"), CustomField("", "")]
    data = serialize_custom_fields(fields)

    assert json.loads(data) == [
        {"key": "b", "value": "2"},
        {"key": "a", "value": "1"},
        {"key": "", "value": ""},
    ]
    assert deserialize_custom_fields(data) == fields


def test_save_writes_all_stamps(store, config) -> None:
    ledger = AnnotationLedger(store, config)
    result = ledger.save(TARGET, [CustomField("client", "Acme")])

    assert result.success is True
    assert store.get(TARGET, "com.mtdata.editedby") == b"MTData for macOS"
    assert store.get(TARGET, "com.mtdata.version") == b"2.0"
    assert store.get(TARGET, "com.mtdata.lastedit") == time_utils.format_iso8601(
        result.value
    ).encode("utf-8")

    stamps = ledger.read_stamps(TARGET)
    assert stamps.edited_by_tool is True
    assert stamps.tool_version == "2.0"
    assert stamps.last_edit_date == result.value
    assert ledger.read_custom_fields(TARGET) == [CustomField("client", "Acme")]


def test_read_defaults_without_stamps(store, config) -> None:
    stamps = AnnotationLedger(store, config).read_stamps(TARGET)
    assert stamps.edited_by_tool is False
    assert stamps.tool_version == "1.0"
    assert stamps.last_edit_date is None


def test_edited_flag_presence_is_enough(store, config) -> None:
    store.set(TARGET, "com.mtdata.editedby", b"")
    store.set(TARGET, "com.mtdata.lastedit", b"yesterday")

    stamps = AnnotationLedger(store, config).read_stamps(TARGET)

    assert stamps.edited_by_tool is True
    assert stamps.last_edit_date is None


def test_malformed_custom_fields_read_as_empty(store, config) -> None:
    store.set(TARGET, "com.mtdata.customfields", b"{not json")
    assert AnnotationLedger(store, config).read_custom_fields(TARGET) == []


def test_remove_all_scans_prefix(store, config) -> None:
    ledger = AnnotationLedger(store, config)
    ledger.save(TARGET, [CustomField("a", "1")])
    store.set(TARGET, "com.mtdata.future", b"x")
    store.set(TARGET, "com.apple.quarantine", b"0081;0;Safari")

    result = ledger.remove_all(TARGET)

    assert result.success is True
    assert store.list_keys(TARGET) == ["com.apple.quarantine"]
    assert ledger.read_stamps(TARGET).edited_by_tool is False


def test_custom_prefix(store, config) -> None:
    config.set("ledger.prefix", "org.example.")
    ledger = AnnotationLedger(store, config)
    ledger.save(TARGET, [])
    assert "org.example.editedby" in store.list_keys(TARGET)
    assert store.get(TARGET, "org.example.customfields") == b"[]"


def test_save_failure_is_reported(store, config) -> None:
    store.fail_writes = True
    result = AnnotationLedger(store, config).save(TARGET, [])
    assert result.success is False
    assert "Permission denied" in result.error_message
