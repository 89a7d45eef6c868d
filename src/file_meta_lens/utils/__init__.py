"""工具模組。"""

from . import image_utils, media_utils, time_utils
from .file_ops import OperationResult, safe_op

__all__ = ["image_utils", "media_utils", "time_utils", "OperationResult", "safe_op"]
