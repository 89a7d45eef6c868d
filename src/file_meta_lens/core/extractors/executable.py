"""執行檔：Mach-O 類型、架構清單與程式碼簽章。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ...utils.file_classifier import MACH_O_MAGICS, read_magic_number
from .base import ExtractionContext, PartialMetadata, put

UNIVERSAL_LABEL = "Universal Binary"
ELF_MAGIC = 0x7F454C46


def executable_format(path: Path) -> Optional[str]:
    magic = read_magic_number(path)
    if magic is None:
        return None
    if magic in MACH_O_MAGICS:
        return MACH_O_MAGICS[magic]
    if magic == ELF_MAGIC:
        return "ELF"
    if (magic >> 16) == 0x2321:  # "#!"
        return "Script"
    return None


def extract_executable_metadata(path: Path, context: ExtractionContext) -> PartialMetadata:
    result: PartialMetadata = {}
    label = executable_format(path)
    put(result, "executable_format", label)
    if label is None or label not in MACH_O_MAGICS.values():
        return result

    inspector = context.executable_inspector
    put(result, "executable_architectures", inspector.architectures(path, label == UNIVERSAL_LABEL))
    signed, authority = inspector.signing_status(path)
    put(result, "executable_code_signed", signed)
    put(result, "executable_signing_authority", authority)
    return result
