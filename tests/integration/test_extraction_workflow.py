import zipfile
from pathlib import Path

import piexif
from PIL import Image
from pypdf import PdfWriter

from file_meta_lens.core.loader import MetadataLoader
from file_meta_lens.core.session import MetadataSession
from file_meta_lens.models import FormatKind

from conftest import FakeArchiveInspector


def _create_jpeg(path: Path) -> None:
    exif = piexif.dump({"0th": {piexif.ImageIFD.Make: b"FUJIFILM"}, "Exif": {}})
    Image.new("RGB", (120, 80), color=(200, 10, 10)).save(path, "jpeg", exif=exif)


def _create_pdf(path: Path) -> None:
    writer = PdfWriter()
    writer.add_blank_page(width=100, height=100)
    writer.add_metadata({"/Title": "Minutes"})
    with path.open("wb") as handle:
        writer.write(handle)


def _create_docx(path: Path) -> None:
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr(
            "docProps/core.xml",
            "<cp:coreProperties><dc:title>Plan</dc:title></cp:coreProperties>",
        )
        archive.writestr("word/document.xml", "<w:document/>")


def _create_zip(path: Path) -> None:
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("a.txt", "a")
        archive.writestr("b.txt", "b")


def test_each_format_reaches_its_extractor(tmp_path: Path, store, config, context) -> None:
    context.archive_inspector = FakeArchiveInspector(count=2)
    loader = MetadataLoader(store, config, context=context)

    files = {
        "photo.jpg": (_create_jpeg, FormatKind.IMAGE, "exif_camera_make", "FUJIFILM"),
        "minutes.pdf": (_create_pdf, FormatKind.PDF, "pdf_title", "Minutes"),
        "plan.docx": (_create_docx, FormatKind.OFFICE_DOCUMENT, "office_title", "Plan"),
        "bundle.zip": (_create_zip, FormatKind.ARCHIVE, "archive_file_count", 2),
    }
    for name, (create, expected_kind, field_name, expected_value) in files.items():
        path = tmp_path / name
        create(path)
        session = MetadataSession(store, config, loader=loader)
        try:
            assert session.load(path).success is True
            assert session.current.format_kind == expected_kind
            extended = session.wait_for_extended_metadata()
            assert getattr(extended, field_name) == expected_value
        finally:
            session.close()


def test_markdown_round_trip_with_annotations(tmp_path: Path, store, config, context) -> None:
    path = tmp_path / "post.md"
    path.write_text("---\ntitle: Launch\n---\nBody text\n", encoding="utf-8")
    loader = MetadataLoader(store, config, context=context)

    session = MetadataSession(store, config, loader=loader)
    try:
        session.load(path)
        field = session.add_custom_field("", "")
        assert session.is_field_modified(field.id) is True
        session.update_custom_field(field.id, key="audience", value="internal")
        assert session.save().success is True

        extended = session.wait_for_extended_metadata()
        assert extended.text_front_matter == {"title": "Launch"}

        session.reload()
        assert session.has_changes() is False
        assert session.current.custom_fields[0].value == "internal"
    finally:
        session.close()

    assert path.read_text(encoding="utf-8").startswith("---\ntitle: Launch")
