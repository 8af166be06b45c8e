"""Compatibility rules. Each rule is independent and can be switched off in [checks]."""

from dataclasses import dataclass, field
from typing import Any, Protocol

from ..adapters.edn_config import extract_page_title_format
from ..adapters.json_settings import SettingsReader
from ..config import BridgeConfig
from ..core.model import (
    ContentReplaceFix,
    CorpusFile,
    Issue,
    NamespaceRenameFix,
    RenameFix,
    SettingsUpdateFix,
)
from ..core.ports import CorpusStore
from .text import DATE_NAME, find_task_markers, split_namespace, translate_date_format

DEFAULT_DAILY_FORMAT = "YYYY-MM-DD"


@dataclass
class ScanContext:
    corpus: CorpusStore
    config: BridgeConfig
    settings: SettingsReader
    _logseq_config: str | None = field(default=None, init=False)
    _logseq_loaded: bool = field(default=False, init=False)

    def logseq_config(self) -> str | None:
        """config.edn text, or None when missing or unreadable."""
        if not self._logseq_loaded:
            self._logseq_loaded = True
            path = self.config.vault.logseq_config_path
            try:
                if self.corpus.exists(path):
                    self._logseq_config = self.corpus.read(path)
            except (OSError, UnicodeDecodeError):
                self._logseq_config = None
        return self._logseq_config

    def under(self, file: CorpusFile, folder: str) -> bool:
        return file.path.startswith(folder + "/") if folder else True


class SettingsRule(Protocol):
    id: str
    toggle: str

    def check(self, ctx: ScanContext) -> list[Issue]:
        pass


class FileRule(Protocol):
    id: str
    toggle: str

    def check(self, file: CorpusFile, ctx: ScanContext) -> list[Issue]:
        pass


def _settings_issue(label: str, target: str, key: str, current: Any, expected: str) -> list[Issue]:
    if current == expected:
        return []
    shown = f'"{current}"' if current not in (None, "") else "not set"
    return [
        Issue(
            type="Settings",
            description=f"{label} is {shown}, expected \"{expected}\".",
            suggested_fix=f'Set {key} in {target}.json to "{expected}".',
            fix=SettingsUpdateFix(target=target, key=key, value=expected),
        )
    ]


class NewFileFolderRule:
    id = "new-file-folder"
    toggle = "new_file_folder"

    def check(self, ctx: ScanContext) -> list[Issue]:
        current = ctx.settings.get("app", "newFileFolderPath")
        if isinstance(current, str):
            current = current.strip("/")
        return _settings_issue(
            "Default folder for new notes", "app", "newFileFolderPath",
            current, ctx.config.vault.pages_folder,
        )


class NewFileLocationRule:
    id = "new-file-location"
    toggle = "new_file_location"

    def check(self, ctx: ScanContext) -> list[Issue]:
        current = ctx.settings.get("app", "newFileLocation")
        return _settings_issue(
            "Default location for new notes", "app", "newFileLocation", current, "folder"
        )


class DailyFolderRule:
    id = "daily-folder"
    toggle = "daily_folder"

    def check(self, ctx: ScanContext) -> list[Issue]:
        current = ctx.settings.get("daily-notes", "folder")
        if isinstance(current, str):
            current = current.strip("/")
        return _settings_issue(
            "Daily notes folder", "daily-notes", "folder",
            current, ctx.config.vault.journals_folder,
        )


class DailyFormatRule:
    id = "daily-format"
    toggle = "daily_format"

    def expected(self, ctx: ScanContext) -> str:
        text = ctx.logseq_config()
        title_format = extract_page_title_format(text) if text else None
        if not title_format:
            return DEFAULT_DAILY_FORMAT
        return translate_date_format(title_format)

    def check(self, ctx: ScanContext) -> list[Issue]:
        current = ctx.settings.get("daily-notes", "format")
        return _settings_issue(
            "Daily note date format", "daily-notes", "format", current, self.expected(ctx)
        )


class DateRule:
    id = "date"
    toggle = "date"

    def check(self, file: CorpusFile, ctx: ScanContext) -> list[Issue]:
        if not ctx.under(file, ctx.config.vault.journals_folder):
            return []
        m = DATE_NAME.match(file.basename)
        if m is None:
            return [
                Issue(
                    type="Date",
                    file=file,
                    description=f'Journal file "{file.path}" does not match YYYY-MM-DD or YYYY_MM_DD.',
                    suggested_fix="No automatic fix available (manual rename recommended).",
                )
            ]
        year, sep1, month, sep2, day = m.groups()
        if sep1 == "-" and sep2 == "-":
            return []
        new_name = f"{year}-{month}-{day}"
        new_path = f"{file.parent}/{new_name}.md" if file.parent else f"{new_name}.md"
        return [
            Issue(
                type="Date",
                file=file,
                description=f'Journal file "{file.path}" uses underscores in its date.',
                suggested_fix=f'Rename to "{new_path}".',
                fix=RenameFix(new_path=new_path),
            )
        ]


class NamespaceRule:
    id = "namespace"
    toggle = "namespace"

    def check(self, file: CorpusFile, ctx: ScanContext) -> list[Issue]:
        if not ctx.under(file, ctx.config.vault.pages_folder):
            return []
        split = split_namespace(file.basename)
        if split is None:
            return []
        hierarchy, leaf = split
        namespace = "/".join(hierarchy)
        new_path = f"{file.parent}/{leaf}.md" if file.parent else f"{leaf}.md"
        return [
            Issue(
                type="Namespace",
                file=file,
                description=f'File "{file.path}" encodes the namespace "{namespace}" in its name.',
                suggested_fix=f'Rename to "{new_path}" and add "tags: {namespace}".',
                fix=NamespaceRenameFix(
                    new_path=new_path,
                    namespace_path=namespace,
                    original_name=file.basename,
                ),
            )
        ]


class TaskMarkerRule:
    id = "task-marker"
    toggle = "task_marker"

    def check(self, file: CorpusFile, ctx: ScanContext) -> list[Issue]:
        content = ctx.corpus.read(file.path)
        markers = find_task_markers(content)
        if not markers:
            return []
        return [
            Issue(
                type="Task Marker",
                file=file,
                description=f'File "{file.path}" contains task markers ({", ".join(markers)}).',
                suggested_fix="Convert markers to Markdown tasks (- [ ] / - [x]).",
                fix=ContentReplaceFix(content=content),
            )
        ]


SETTINGS_RULES: list[SettingsRule] = [
    NewFileFolderRule(),
    NewFileLocationRule(),
    DailyFolderRule(),
    DailyFormatRule(),
]

FILE_RULES: list[FileRule] = [
    DateRule(),
    NamespaceRule(),
    TaskMarkerRule(),
]
