"""Apply the fixes the user selected from one scan."""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from ..adapters.json_settings import SettingsReader
from ..config import BridgeConfig
from ..core.model import (
    ContentReplaceFix,
    Issue,
    NamespaceRenameFix,
    RenameFix,
    SettingsUpdateFix,
)
from ..core.ports import CorpusStore
from .text import convert_task_markers, insert_namespace_tags

log = logging.getLogger(__name__)


@dataclass
class FixFailure:
    issue: Issue
    error: str


@dataclass
class FixReport:
    renames: int = 0
    content_fixes: int = 0
    settings_updates: int = 0
    skipped: int = 0  # selected issues without a fix
    unchanged: int = 0  # content fixes that had nothing to convert
    failures: list[FixFailure] = field(default_factory=list)

    @property
    def applied(self) -> int:
        return self.renames + self.content_fixes + self.settings_updates

    def summary(self) -> str:
        text = (
            f"Applied {self.renames} renames, {self.content_fixes} content fixes "
            f"and {self.settings_updates} settings updates."
        )
        if self.unchanged:
            text += f" {self.unchanged} files had no convertible task lines."
        if self.failures:
            text += f" {len(self.failures)} failed."
        return text


def _ensure_parent(corpus: CorpusStore, path: str) -> None:
    folder = path.rsplit("/", 1)[0] if "/" in path else ""
    if folder and not corpus.exists(folder):
        corpus.mkdir(folder)


def _apply_one(
    issue: Issue,
    corpus: CorpusStore,
    settings: SettingsReader,
    report: FixReport,
    moved: dict[str, str],
) -> None:
    fix = issue.fix
    if isinstance(fix, SettingsUpdateFix):
        settings.update(fix.target, fix.key, fix.value)
        report.settings_updates += 1
        return

    if issue.file is None:
        raise ValueError(f"{issue.type} fix without a file")
    # a file renamed earlier in this run is fixed at its new path
    path = moved.get(issue.file.path, issue.file.path)

    if isinstance(fix, NamespaceRenameFix):
        if corpus.exists(fix.new_path):
            raise FileExistsError(f"Destination already exists: {fix.new_path}")
        # rewrite content first, the old path is gone after the rename
        content = corpus.read(path)
        corpus.write(path, insert_namespace_tags(content, fix.namespace_path))
        _ensure_parent(corpus, fix.new_path)
        corpus.rename(path, fix.new_path)
        moved[issue.file.path] = fix.new_path
        report.renames += 1
    elif isinstance(fix, RenameFix):
        _ensure_parent(corpus, fix.new_path)
        corpus.rename(path, fix.new_path)
        moved[issue.file.path] = fix.new_path
        report.renames += 1
    elif isinstance(fix, ContentReplaceFix):
        content = corpus.read(path)
        converted = convert_task_markers(content)
        if converted == content:
            report.unchanged += 1
            return
        corpus.write(path, converted)
        report.content_fixes += 1
    else:
        raise ValueError(f"Unknown fix {fix!r}")


def apply_fixes(
    issues: Iterable[Issue],
    corpus: CorpusStore,
    config: BridgeConfig,
    settings: SettingsReader | None = None,
) -> FixReport:
    """
    Apply each selected issue's fix in the given order.

    A failing item is logged and recorded; the remaining items still run.

    Args:
        issues: Selected issues from one scan
        corpus: Vault storage to modify
        config: Configuration (obsidian folder for settings files)
        settings: Settings reader/writer; built from config when omitted

    Returns:
        FixReport with counts and failures
    """
    if settings is None:
        settings = SettingsReader(corpus, config.vault.obsidian_folder)

    report = FixReport()
    moved: dict[str, str] = {}
    for issue in issues:
        if issue.fix is None:
            report.skipped += 1
            continue
        try:
            _apply_one(issue, corpus, settings, report, moved)
        except Exception as e:
            where = issue.file.path if issue.file else issue.fix.kind
            log.exception("Failed to fix %s issue for %s", issue.type, where)
            report.failures.append(FixFailure(issue=issue, error=str(e)))

    log.info(report.summary())
    return report
