"""資料模型模組。"""

from .custom_field import CustomField
from .extended_metadata import ExtendedMetadata
from .file_metadata import FileMetadata
from .format_kind import FormatKind
from .quarantine_info import QuarantineInfo

__all__ = [
    "CustomField",
    "ExtendedMetadata",
    "FileMetadata",
    "FormatKind",
    "QuarantineInfo",
]
