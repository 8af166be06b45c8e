"""Read and update the outliner's config.edn (favorites, journal title format).

Only two keys matter here, so the file is handled as text with regular
expressions rather than parsed as EDN. Edits are spliced into the original
text so everything outside the edited span survives byte for byte.

Known limitation: the favorites match stops at the first ``]``, so a page
name containing a literal ``]`` truncates the list.
"""

import re
from typing import Iterable

_COMMENT_LINE = re.compile(r"^[ \t]*;;.*$", re.MULTILINE)
_FAVORITES = re.compile(r":favorites\s*\[([^\]]*)\]")
_QUOTED = re.compile(r'"([^"]+)"')
_TITLE_FORMAT = re.compile(r':journal/page-title-format\s+"([^"]*)"')


def strip_comments(text: str) -> str:
    """Blank out ``;;`` comment lines.

    Comment characters are replaced by spaces instead of being removed, so
    match offsets in the result are valid offsets into ``text``.
    """
    return _COMMENT_LINE.sub(lambda m: " " * len(m.group(0)), text)


def extract_favorites(config_text: str) -> set[str]:
    """Return the page names listed under ``:favorites``; empty if the key is absent."""
    match = _FAVORITES.search(strip_comments(config_text))
    if not match:
        return set()
    return set(_QUOTED.findall(match.group(1)))


def extract_page_title_format(config_text: str) -> str | None:
    match = _TITLE_FORMAT.search(strip_comments(config_text))
    return match.group(1) if match else None


def serialize_favorites(names: Iterable[str]) -> str:
    return " ".join(f'"{name}"' for name in sorted(set(names)))


def merge_favorites(config_text: str, names: Iterable[str]) -> str:
    """
    Add names to the favorites list and return the new config text.

    The merged list is sorted. If the key exists only the bracket contents
    change; otherwise a ``:favorites`` entry is added before the closing
    brace of the top-level map (or at the end of the text).
    """
    merged = extract_favorites(config_text) | set(names)
    serialized = serialize_favorites(merged)

    masked = strip_comments(config_text)
    match = _FAVORITES.search(masked)
    if match:
        return config_text[: match.start(1)] + serialized + config_text[match.end(1) :]

    entry = f":favorites [{serialized}]"
    close = masked.rfind("}")
    if close == -1:
        sep = "" if not config_text or config_text.endswith("\n") else "\n"
        return f"{config_text}{sep}{entry}\n"
    return f"{config_text[:close]}\n {entry}{config_text[close:]}"
