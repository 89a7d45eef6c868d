"""設定檔驗證邏輯。"""

from __future__ import annotations

from typing import Any


def validate_config(config: dict[str, Any]) -> list[str]:
    errors: list[str] = []

    def add_error(path: str, message: str) -> None:
        errors.append(f"{path}: {message}")

    ledger = config.get("ledger", {})
    prefix = ledger.get("prefix")
    if not isinstance(prefix, str) or not prefix.strip():
        add_error("ledger.prefix", "必須是非空字串")
    elif not prefix.endswith("."):
        add_error("ledger.prefix", "必須以 . 結尾")
    for key in ("tool_name", "tool_version"):
        value = ledger.get(key)
        if not isinstance(value, str) or not value.strip():
            add_error(f"ledger.{key}", "必須是非空字串")

    namespace = config.get("attributes", {}).get("linux_namespace", "user.")
    if not isinstance(namespace, str):
        add_error("attributes.linux_namespace", "必須是字串")

    extraction = config.get("extraction", {})
    timeout = extraction.get("command_timeout_sec")
    if not isinstance(timeout, (int, float)) or timeout <= 0:
        add_error("extraction.command_timeout_sec", "必須是大於 0 的數值")
    text_max_bytes = extraction.get("text_max_bytes")
    if not isinstance(text_max_bytes, int) or text_max_bytes <= 0:
        add_error("extraction.text_max_bytes", "必須是正整數")

    retry = config.get("retry", {})
    max_retries = retry.get("max_retries", 0)
    backoff_base_sec = retry.get("backoff_base_sec", 0.2)
    backoff_cap_sec = retry.get("backoff_cap_sec", 2.0)
    if not isinstance(max_retries, int) or max_retries < 0:
        add_error("retry.max_retries", "必須是大於等於 0 的整數")
    if not isinstance(backoff_base_sec, (int, float)) or backoff_base_sec <= 0:
        add_error("retry.backoff_base_sec", "必須是大於 0 的數值")
    if not isinstance(backoff_cap_sec, (int, float)) or backoff_cap_sec <= 0:
        add_error("retry.backoff_cap_sec", "必須是大於 0 的數值")
    if (
        isinstance(backoff_base_sec, (int, float))
        and isinstance(backoff_cap_sec, (int, float))
        and backoff_base_sec > backoff_cap_sec
    ):
        add_error("retry", "backoff_base_sec 不可大於 backoff_cap_sec")

    file_extensions = config.get("file_extensions", {})
    if not isinstance(file_extensions, dict):
        add_error("file_extensions", "必須是物件")
    else:
        for kind_name, exts in file_extensions.items():
            if not isinstance(exts, list) or any(
                not isinstance(item, str) or not item.startswith(".") for item in exts
            ):
                add_error(f"file_extensions.{kind_name}", "必須是以 . 開頭的字串清單")

    return errors
