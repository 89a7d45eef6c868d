from pathlib import Path

from file_meta_lens.core.extractors.archive import archive_format_label, extract_archive_metadata
from file_meta_lens.core.extractors.executable import (
    executable_format,
    extract_executable_metadata,
)
from file_meta_lens.core.inspectors import ArchiveInspector, ExecutableInspector

from conftest import FakeArchiveInspector, FakeCompleted, FakeExecutableInspector, FakeRunner


def test_archive_format_label() -> None:
    assert archive_format_label(Path("backup.tar.gz")) == "TAR.GZ"
    assert archive_format_label(Path("backup.TAR.BZ2")) == "TAR.BZ2"
    assert archive_format_label(Path("bundle.zip")) == "ZIP"
    assert archive_format_label(Path("photos.7z")) == "7Z"
    assert archive_format_label(Path("data.cab")) == "CAB"
    assert archive_format_label(Path("README")) is None


def test_extract_archive_uses_inspector(tmp_path: Path, context) -> None:
    context.archive_inspector = FakeArchiveInspector(count=3)
    archive = tmp_path / "bundle.zip"
    archive.write_bytes(b"PK")

    result = extract_archive_metadata(archive, context)

    assert result == {"archive_format": "ZIP", "archive_file_count": 3}
    assert context.archive_inspector.calls == [(archive, "ZIP")]


def test_archive_count_missing_when_tool_fails(tmp_path: Path, context) -> None:
    context.archive_inspector = FakeArchiveInspector(count=None)
    archive = tmp_path / "logs.tar.xz"
    archive.write_bytes(b"")

    assert extract_archive_metadata(archive, context) == {"archive_format": "TAR.XZ"}


def test_zip_listing_excludes_directories() -> None:
    listing = (
        "Archive:  bundle.zip\n"
        "    testing: docs/                    OK\n"
        "    testing: docs/readme.txt          OK\n"
        "    testing: image.png                OK\n"
        "No errors detected in compressed data of bundle.zip.\n"
    )
    inspector = ArchiveInspector(FakeRunner({"unzip": FakeCompleted(stdout=listing)}))
    assert inspector.count_entries(Path("bundle.zip"), "ZIP") == 2


def test_tar_listing() -> None:
    listing = "src/\nsrc/main.py\nsrc/util.py\nREADME\n"
    inspector = ArchiveInspector(FakeRunner({"tar": FakeCompleted(stdout=listing)}))
    assert inspector.count_entries(Path("src.tar.gz"), "TAR.GZ") == 3
    assert inspector.count_entries(Path("src.rar"), "RAR") is None


def test_missing_tool_means_unknown_count() -> None:
    inspector = ArchiveInspector(FakeRunner())
    assert inspector.count_entries(Path("bundle.zip"), "ZIP") is None


def test_executable_format(tmp_path: Path) -> None:
    cases = {
        "thin64": (b"\xcf\xfa\xed\xfe", "Mach-O 64-bit"),
        "thin32": (b"\xce\xfa\xed\xfe", "Mach-O 32-bit"),
        "fat": (b"\xca\xfe\xba\xbe", "Universal Binary"),
        "linux": (b"\x7fELF", "ELF"),
        "script": (b"#!/bin/sh\n", "Script"),
        "data": (b"\x00\x00\x00\x00", None),
    }
    for name, (head, expected) in cases.items():
        target = tmp_path / name
        target.write_bytes(head + b"\x00" * 16)
        assert executable_format(target) == expected


def test_extract_mach_o(tmp_path: Path, context) -> None:
    inspector = FakeExecutableInspector(
        archs=["x86_64", "arm64"], signed=True, authority="Developer ID Application: Acme"
    )
    context.executable_inspector = inspector
    binary = tmp_path / "tool"
    binary.write_bytes(b"\xca\xfe\xba\xbe" + b"\x00" * 16)

    result = extract_executable_metadata(binary, context)

    assert result == {
        "executable_format": "Universal Binary",
        "executable_architectures": ["x86_64", "arm64"],
        "executable_code_signed": True,
        "executable_signing_authority": "Developer ID Application: Acme",
    }
    assert inspector.universal_flags == [True]


def test_unsigned_mach_o_keeps_flag(tmp_path: Path, context) -> None:
    context.executable_inspector = FakeExecutableInspector(signed=False)
    binary = tmp_path / "tool"
    binary.write_bytes(b"\xcf\xfa\xed\xfe" + b"\x00" * 16)

    result = extract_executable_metadata(binary, context)

    assert result == {"executable_format": "Mach-O 64-bit", "executable_code_signed": False}


def test_elf_skips_inspectors(tmp_path: Path, context) -> None:
    inspector = FakeExecutableInspector(archs=["x86_64"], signed=True)
    context.executable_inspector = inspector
    binary = tmp_path / "prog"
    binary.write_bytes(b"\x7fELF" + b"\x00" * 16)

    assert extract_executable_metadata(binary, context) == {"executable_format": "ELF"}
    assert inspector.universal_flags == []


def test_executable_inspector_parsing() -> None:
    runner = FakeRunner(
        {
            "lipo": FakeCompleted(stdout="x86_64 arm64\n"),
            "file": FakeCompleted(stdout="Mach-O 64-bit executable arm64\n"),
            "codesign": FakeCompleted(
                stderr=(
                    "Executable=/usr/local/bin/tool\n"
                    "Authority=Developer ID Application: Acme (ABCDE12345)\n"
                    "Authority=Developer ID Certification Authority\n"
                ),
            ),
        }
    )
    inspector = ExecutableInspector(runner)

    assert inspector.architectures(Path("tool"), universal=True) == ["x86_64", "arm64"]
    assert inspector.architectures(Path("tool"), universal=False) == ["arm64"]
    assert inspector.signing_status(Path("tool")) == (
        True,
        "Developer ID Application: Acme (ABCDE12345)",
    )


def test_codesign_failure_means_unsigned() -> None:
    runner = FakeRunner(
        {"codesign": FakeCompleted(stderr="code object is not signed at all", returncode=1)}
    )
    assert ExecutableInspector(runner).signing_status(Path("tool")) == (False, None)
    assert ExecutableInspector(FakeRunner()).signing_status(Path("tool")) == (None, None)
