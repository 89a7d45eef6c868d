"""ZIP 容器內 XML 項目的暫存解壓與標籤擷取。

只做平面的 `<tag ...>內容</tag>` 正規表示式擷取，不做完整 XML 解析；同名
標籤出現在其他巢狀位置時不會被區分。
"""

from __future__ import annotations

import html
import re
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Sequence


@contextmanager
def extracted_entries(archive_path: Path, names: Sequence[str]) -> Iterator[dict[str, Path]]:
    """解壓指定項目到暫存目錄；離開 with 區塊時不論成敗都刪除目錄。

    產出 name -> 解壓後路徑，只包含實際存在的項目。
    """
    with tempfile.TemporaryDirectory(prefix="file_meta_lens_") as temp_dir:
        extracted: dict[str, Path] = {}
        with zipfile.ZipFile(archive_path) as archive:
            available = set(archive.namelist())
            for name in names:
                if name not in available:
                    continue
                extracted[name] = Path(archive.extract(name, temp_dir))
        yield extracted


def read_xml_text(path: Path) -> str:
    return path.read_bytes().decode("utf-8", errors="replace")


def scrape_tag(xml_text: str, tag: str) -> Optional[str]:
    pattern = re.compile(
        rf"<{re.escape(tag)}(?:\s[^>]*)?>(.*?)</{re.escape(tag)}>",
        re.DOTALL,
    )
    match = pattern.search(xml_text)
    if not match:
        return None
    value = html.unescape(match.group(1)).strip()
    return value or None


def scrape_int(xml_text: str, tag: str) -> Optional[int]:
    value = scrape_tag(xml_text, tag)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
