"""核心流程模組。"""

from .attribute_store import XattrAttributeStore
from .change_tracker import ChangeSet, compute_changes, has_changes
from .inspectors import ArchiveInspector, CommandRunner, ExecutableInspector, MediaInspector
from .ledger import AnnotationLedger, LedgerStamps
from .loader import MetadataLoader
from .merger import MetadataMerger
from .session import MetadataSession
from .system_attributes import SystemAttributesEditor, SystemAttributesExtractor

__all__ = [
    "AnnotationLedger",
    "ArchiveInspector",
    "ChangeSet",
    "CommandRunner",
    "ExecutableInspector",
    "LedgerStamps",
    "MediaInspector",
    "MetadataLoader",
    "MetadataMerger",
    "MetadataSession",
    "SystemAttributesEditor",
    "SystemAttributesExtractor",
    "XattrAttributeStore",
    "compute_changes",
    "has_changes",
]
