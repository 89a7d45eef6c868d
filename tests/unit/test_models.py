from datetime import datetime, timezone
from pathlib import Path

from file_meta_lens.models import (
    CustomField,
    ExtendedMetadata,
    FileMetadata,
    FormatKind,
    QuarantineInfo,
)


def _make_metadata() -> FileMetadata:
    metadata = FileMetadata.empty(Path("/tmp/report.pdf"))
    metadata.creation_date = datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)
    metadata.format_kind = FormatKind.PDF
    metadata.custom_fields = [CustomField("project", "apollo"), CustomField("owner", "kim")]
    return metadata


def test_file_metadata_equality_ignores_icon() -> None:
    first = _make_metadata()
    second = first.copy()
    first.icon = object()
    second.icon = object()
    assert first == second


def test_file_metadata_copy_is_deep() -> None:
    original = _make_metadata()
    original.icon = "icon-handle"
    duplicated = original.copy()

    duplicated.custom_fields[0].value = "gemini"
    duplicated.custom_fields.append(CustomField("extra", "1"))

    assert original.custom_fields[0].value == "apollo"
    assert len(original.custom_fields) == 2
    assert duplicated.custom_fields[0].id == original.custom_fields[0].id
    assert duplicated.icon is original.icon


def test_custom_field_equality_ignores_id() -> None:
    assert CustomField("a", "1") == CustomField("a", "1")
    assert CustomField("a", "1").id != CustomField("a", "1").id
    assert CustomField("a", "1").to_dict() == {"key": "a", "value": "1"}


def test_extended_metadata_has_any_data() -> None:
    assert ExtendedMetadata().has_any_data is False
    assert ExtendedMetadata(user_tags=[], comment="").has_any_data is False
    assert ExtendedMetadata(pdf_page_count=3).has_any_data is True


def test_extended_metadata_to_dict_skips_empty() -> None:
    extended = ExtendedMetadata(
        pdf_title="Report",
        pdf_author="",
        pdf_creation_date=datetime(2023, 1, 2, 3, 4, 5),
    )
    data = extended.to_dict()
    assert data == {"pdf_title": "Report", "pdf_creation_date": "2023-01-02T03:04:05"}


def test_quarantine_parse_full() -> None:
    info = QuarantineInfo.parse("0083;65a1b2c3;Safari;https://example.com/file.zip")
    assert info.flags == "0083"
    assert info.agent_name == "Safari"
    assert info.downloaded_from == "https://example.com/file.zip"
    # 十六進位字串不是十進位秒數，時間戳保持缺席
    assert info.timestamp is None


def test_quarantine_parse_decimal_timestamp() -> None:
    info = QuarantineInfo.parse("0081;86400;Chrome")
    assert info.timestamp == datetime(2001, 1, 2, tzinfo=timezone.utc)
    assert info.agent_name == "Chrome"
    assert info.downloaded_from is None


def test_quarantine_parse_short() -> None:
    info = QuarantineInfo.parse("0081")
    assert info.flags == "0081"
    assert info.timestamp is None
    assert info.agent_name is None


def test_file_metadata_to_dict() -> None:
    data = _make_metadata().to_dict()
    assert data["format_kind"] == "PDF"
    assert data["custom_fields"] == [
        {"key": "project", "value": "apollo"},
        {"key": "owner", "value": "kim"},
    ]
    assert data["extended_metadata"] == {}


def test_quarantine_parse_reference_epoch() -> None:
    info = QuarantineInfo.parse("0081;1700000000;Safari;https://example.com/file")
    assert info.flags == "0081"
    assert info.agent_name == "Safari"
    assert info.downloaded_from == "https://example.com/file"
    assert info.timestamp == datetime(2054, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


def test_quarantine_parse_non_finite_timestamp() -> None:
    for raw_seconds in ("nan", "inf", "-inf"):
        info = QuarantineInfo.parse(f"0081;{raw_seconds};Safari;https://example.com/file")
        assert info.timestamp is None
        assert info.agent_name == "Safari"
        assert info.downloaded_from == "https://example.com/file"
