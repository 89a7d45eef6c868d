"""屬性寫入類操作的結果型別與重試包裝。"""

from __future__ import annotations

import errno
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Optional

from .logger import get_logger

# 這些錯誤重試也不會成功，直接回報
PERMANENT_ERRNOS = frozenset(
    code
    for code in (
        errno.EACCES,
        errno.EPERM,
        errno.ENOENT,
        errno.EROFS,
        errno.ENOSPC,
        errno.ERANGE,
        errno.E2BIG,
        errno.ENOTSUP,
        getattr(errno, "EOPNOTSUPP", None),
    )
    if code is not None
)


@dataclass
class OperationResult:
    success: bool
    error_message: Optional[str] = None
    retry_count: int = 0
    elapsed_time: float = 0.0
    value: Any = None

    @classmethod
    def ok(cls, value: Any = None) -> "OperationResult":
        return cls(success=True, value=value)

    @classmethod
    def failed(cls, message: str) -> "OperationResult":
        return cls(success=False, error_message=message)


def is_transient(exc: BaseException) -> bool:
    return not (isinstance(exc, OSError) and exc.errno in PERMANENT_ERRNOS)


def safe_op(
    *,
    config,
    max_retries: Optional[int] = None,
    exceptions: Optional[tuple[type[BaseException], ...]] = None,
    logger=None,
) -> Callable:
    """包裝屬性寫入：暫時性錯誤以指數退避重試，最後的失敗轉成 OperationResult。

    權限不足、不支援延伸屬性等永久性錯誤不重試。
    """

    cfg_get = getattr(config, "get", None)
    if not callable(cfg_get):
        raise TypeError("config 必須提供 get(key, default) 方法")

    limit = int(max_retries if max_retries is not None else cfg_get("retry.max_retries", 2))
    base = float(cfg_get("retry.backoff_base_sec", 0.2))
    cap = float(cfg_get("retry.backoff_cap_sec", 2.0))
    caught = exceptions if exceptions is not None else (OSError,)
    op_logger = logger or get_logger("AttributeOps")

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> OperationResult:
            started = time.time()
            attempt = 0
            while True:
                try:
                    value = func(*args, **kwargs)
                except caught as exc:
                    if attempt < limit and is_transient(exc):
                        delay = min(base * (2**attempt), cap)
                        attempt += 1
                        op_logger.warning(f"屬性操作重試 {attempt}/{limit}，等待 {delay:.2f}s：{exc}")
                        time.sleep(delay)
                        continue
                    op_logger.error(f"屬性操作失敗（已重試 {attempt} 次）：{exc}")
                    return OperationResult(
                        success=False,
                        error_message=str(exc),
                        retry_count=attempt,
                        elapsed_time=time.time() - started,
                    )
                return OperationResult(
                    success=True,
                    retry_count=attempt,
                    elapsed_time=time.time() - started,
                    value=value,
                )

        return wrapper

    return decorator
