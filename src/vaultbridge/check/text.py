"""Pure text transforms behind the compatibility fixes."""

import io
import re

import yaml

NAMESPACE_SEP = "___"

OPEN_MARKERS = ("TODO", "LATER", "WAITING", "WAIT")
IN_PROGRESS_MARKERS = ("DOING", "NOW", "IN-PROGRESS")
DONE_MARKERS = ("DONE",)
TASK_MARKERS = OPEN_MARKERS + IN_PROGRESS_MARKERS + DONE_MARKERS

# ordinary English words at line start ("Now we...", "Done with..."):
# converted only when written in upper case
UPPERCASE_ONLY = frozenset({"LATER", "WAITING", "WAIT", "NOW", "DONE"})

_MARKER_WORD = re.compile(r"(?<![\w-])(" + "|".join(map(re.escape, TASK_MARKERS)) + r")(?![\w-])")


def _alternative(marker: str) -> str:
    if marker in UPPERCASE_ONLY:
        return "(?-i:" + re.escape(marker) + ")"
    return re.escape(marker)


def _marker_line(markers: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(map(_alternative, markers))
    return re.compile(
        r"^([ \t]*)(?:-[ \t]+)?(?:" + alternatives + r")(?=[ \t]|$)[ \t]?",
        re.IGNORECASE | re.MULTILINE,
    )


_UNCHECKED_LINE = _marker_line(OPEN_MARKERS + IN_PROGRESS_MARKERS)
_CHECKED_LINE = _marker_line(DONE_MARKERS)

_FM = re.compile(r"^---[ \t]*\n(?:(.*?)\n)??---[ \t]*(?:\n|$)", re.DOTALL)

DATE_NAME = re.compile(r"^(\d{4})([-_])(\d{2})([-_])(\d{2})$")


def find_task_markers(content: str) -> list[str]:
    """Markers present as whole words, in order of first appearance."""
    seen: list[str] = []
    for m in _MARKER_WORD.finditer(content):
        if m.group(1) not in seen:
            seen.append(m.group(1))
    return seen


def convert_task_markers(content: str) -> str:
    """
    Turn outliner task lines into Markdown checkboxes.

    ``TODO x`` / ``- DOING x`` -> ``- [ ] x``; ``DONE x`` -> ``- [x] x``.
    Indentation is kept; the rest of the line is untouched.
    """
    content = _UNCHECKED_LINE.sub(r"\1- [ ] ", content)
    return _CHECKED_LINE.sub(r"\1- [x] ", content)


def split_namespace(basename: str) -> tuple[list[str], str] | None:
    """``a___b___c`` -> (["a", "b"], "c"); None if the name has no hierarchy."""
    if basename.startswith(".") or NAMESPACE_SEP not in basename:
        return None
    parts = [p for p in basename.split(NAMESPACE_SEP) if p]
    if len(parts) < 2:
        return None
    return parts[:-1], parts[-1]


def insert_namespace_tags(content: str, namespace: str) -> str:
    """
    Record a namespace as a ``tags:`` line.

    With frontmatter the line goes right after the opening ``---``; an
    existing ``tags`` key is extended instead. Without frontmatter the line
    is prepended.
    """
    line = f"tags: {namespace}\n"
    m = _FM.match(content)
    if not m:
        return line + content
    if m.group(1) is None:
        # empty block: "---\n---\n"
        body_start = content.index("\n") + 1
        return content[:body_start] + line + content[body_start:]

    try:
        meta = yaml.safe_load(io.StringIO(m.group(1)))
    except yaml.YAMLError:
        meta = None

    if isinstance(meta, dict) and "tags" in meta:
        tags = meta["tags"]
        if tags is None:
            tags = []
        elif isinstance(tags, str):
            tags = [t.strip() for t in tags.split(",") if t.strip()]
        elif not isinstance(tags, list):
            tags = [tags]
        if namespace not in tags:
            tags.append(namespace)
        meta["tags"] = tags
        buf = io.StringIO()
        yaml.safe_dump(meta, buf, sort_keys=False, allow_unicode=True)
        return f"---\n{buf.getvalue()}---\n" + content[m.end() :]

    return content[: m.start(1)] + line + content[m.start(1) :]


def translate_date_format(title_format: str) -> str:
    """Outliner date pattern -> Obsidian daily-note format (``yyyy_MM_dd`` -> ``YYYY-MM-dd``)."""
    return title_format.replace("yyyy", "YYYY").replace("_", "-")
