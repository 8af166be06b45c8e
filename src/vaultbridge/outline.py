"""Outliner conventions for journal pages: every block is a "- " bullet."""

import re

_OUTLINE_LINE = re.compile(r"^\t*- ")


def count_non_outline_lines(text: str) -> int:
    """Non-blank lines that are not (tab-indented) "- " bullets."""
    return sum(
        1
        for line in text.splitlines()
        if line.strip() and not _OUTLINE_LINE.match(line)
    )


def ensure_journal_bullet(text: str) -> str:
    if text.startswith("- "):
        return text
    return "- " + text
