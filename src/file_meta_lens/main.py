from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from . import __version__
from .config import ConfigManager
from .core import MetadataSession, XattrAttributeStore
from .models import FileMetadata
from .utils import time_utils
from .utils.file_ops import OperationResult


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    config = ConfigManager(Path(args.config) if args.config else None)
    errors = config.validate_config()
    if errors:
        for error in errors:
            print(f"設定錯誤: {error}", file=sys.stderr)
        return 2

    session = MetadataSession(XattrAttributeStore(config), config)
    try:
        loaded = session.load(Path(args.path))
        if not loaded.success:
            print(f"無法讀取檔案: {loaded.error_message}", file=sys.stderr)
            return 1
        handler = _COMMANDS[args.command]
        return handler(args, session)
    finally:
        session.close()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="file-meta-lens")
    parser.add_argument("--version", action="version", version=f"file-meta-lens v{__version__}")
    parser.add_argument("--config", help="Path to config file", default=None)

    subparsers = parser.add_subparsers(dest="command")

    show = subparsers.add_parser("show", help="Show file metadata")
    show.add_argument("path", help="Target file")
    show.add_argument("--extended", action="store_true", help="Include extended metadata")
    show.add_argument("--json", action="store_true", help="Print as JSON")

    set_field = subparsers.add_parser("set-field", help="Add or update a custom field")
    set_field.add_argument("path", help="Target file")
    set_field.add_argument("key", help="Field key")
    set_field.add_argument("value", help="Field value")

    remove_field = subparsers.add_parser("remove-field", help="Remove custom fields by key")
    remove_field.add_argument("path", help="Target file")
    remove_field.add_argument("key", help="Field key")

    remove_all = subparsers.add_parser("remove-all", help="Remove all annotations")
    remove_all.add_argument("path", help="Target file")

    quarantine = subparsers.add_parser("remove-quarantine", help="Remove the quarantine flag")
    quarantine.add_argument("path", help="Target file")

    tags = subparsers.add_parser("tags", help="Replace user tags (no tags clears them)")
    tags.add_argument("path", help="Target file")
    tags.add_argument("tags", nargs="*", help="Tag names")

    comment = subparsers.add_parser("comment", help="Set the file comment")
    comment.add_argument("path", help="Target file")
    comment.add_argument("text", help="Comment text")

    return parser


def _report(result: OperationResult, done_message: str) -> int:
    if not result.success:
        print(f"操作失敗: {result.error_message}", file=sys.stderr)
        return 1
    print(done_message)
    return 0


def _format_moment(value) -> str:
    return time_utils.format_iso8601(value) if value is not None else "-"


def _print_summary(metadata: FileMetadata, extended: bool) -> None:
    print(f"Name:          {metadata.name}")
    print(f"Kind:          {metadata.format_kind.value}")
    print(f"Size:          {metadata.size}")
    print(f"Permissions:   {metadata.permissions}")
    print(f"Created:       {_format_moment(metadata.creation_date)}")
    print(f"Modified:      {_format_moment(metadata.modification_date)}")
    if metadata.edited_by_tool:
        print(f"Edited by tool v{metadata.tool_version} at {_format_moment(metadata.last_edit_date)}")
    if metadata.custom_fields:
        print("Custom fields:")
        for item in metadata.custom_fields:
            print(f"  {item.key}: {item.value}")
    if extended:
        items = metadata.extended_metadata.to_dict()
        if items:
            print("Extended metadata:")
            for name, value in items.items():
                print(f"  {name}: {value}")


def _run_show(args: argparse.Namespace, session: MetadataSession) -> int:
    if args.extended:
        session.wait_for_extended_metadata()
    metadata = session.current
    if args.json:
        payload = metadata.to_dict()
        if not args.extended:
            payload.pop("extended_metadata", None)
        print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))
    else:
        _print_summary(metadata, args.extended)
    return 0


def _run_set_field(args: argparse.Namespace, session: MetadataSession) -> int:
    existing = [item for item in session.current.custom_fields if item.key == args.key]
    if existing:
        session.update_custom_field(existing[0].id, value=args.value)
    else:
        session.add_custom_field(args.key, args.value)
    if not session.has_changes():
        print("沒有需要儲存的變更")
        return 0
    return _report(session.save(), f"已儲存: {args.key}")


def _run_remove_field(args: argparse.Namespace, session: MetadataSession) -> int:
    targets = [item.id for item in session.current.custom_fields if item.key == args.key]
    if not targets:
        print(f"找不到欄位: {args.key}", file=sys.stderr)
        return 1
    for field_id in targets:
        session.remove_custom_field(field_id)
    return _report(session.save(), f"已移除: {args.key}")


def _run_remove_all(args: argparse.Namespace, session: MetadataSession) -> int:
    return _report(session.remove_all_metadata(), "已移除全部註記")


def _run_remove_quarantine(args: argparse.Namespace, session: MetadataSession) -> int:
    return _report(session.remove_quarantine(), "已移除 quarantine 標記")


def _run_tags(args: argparse.Namespace, session: MetadataSession) -> int:
    return _report(session.update_user_tags(args.tags), "已更新標籤")


def _run_comment(args: argparse.Namespace, session: MetadataSession) -> int:
    return _report(session.update_comment(args.text), "已更新註解")


_COMMANDS = {
    "show": _run_show,
    "set-field": _run_set_field,
    "remove-field": _run_remove_field,
    "remove-all": _run_remove_all,
    "remove-quarantine": _run_remove_quarantine,
    "tags": _run_tags,
    "comment": _run_comment,
}


if __name__ == "__main__":
    sys.exit(main())
