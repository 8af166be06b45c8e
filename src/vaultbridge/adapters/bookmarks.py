"""Obsidian bookmarks.json handling.

The whole JSON object is round-tripped; only ``items`` entries with
``type == "file"`` are looked at or added.
"""

import json
import time
from typing import Any, Callable

from ..core.errors import StoreParseError
from ..core.model import CorpusFile


def parse_bookmarks(text: str, path: str = "bookmarks.json") -> dict[str, Any]:
    """Parse the bookmark store. Invalid JSON or a non-object root is fatal."""
    try:
        root = json.loads(text)
    except json.JSONDecodeError as e:
        raise StoreParseError(path, str(e)) from e
    if not isinstance(root, dict):
        raise StoreParseError(path, "root is not an object")
    items = root.setdefault("items", [])
    if not isinstance(items, list):
        raise StoreParseError(path, '"items" is not a list')
    return root


def file_items(root: dict[str, Any]) -> list[dict[str, Any]]:
    return [
        item
        for item in root.get("items", [])
        if isinstance(item, dict) and item.get("type") == "file"
    ]


def bookmarked_paths(root: dict[str, Any]) -> set[str]:
    return {item["path"] for item in file_items(root) if item.get("path")}


def extract_bookmarked_names(
    root: dict[str, Any], lookup: Callable[[str], CorpusFile | None]
) -> set[str]:
    """Basenames of bookmarked files; paths that no longer resolve are skipped."""
    names: set[str] = set()
    for item in file_items(root):
        path = item.get("path")
        if not path:
            continue
        f = lookup(path)
        if f is not None:
            names.add(f.basename)
    return names


def append_bookmark(root: dict[str, Any], path: str, now: int | None = None) -> bool:
    """Append a file bookmark unless the path is already bookmarked.

    Returns:
        True if an item was appended
    """
    if path in bookmarked_paths(root):
        return False
    ctime = now if now is not None else int(time.time() * 1000)
    root["items"].append({"type": "file", "ctime": ctime, "path": path})
    return True


def dump_bookmarks(root: dict[str, Any]) -> str:
    return json.dumps(root, indent=2, ensure_ascii=False)
