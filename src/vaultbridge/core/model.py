from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Literal, Union

EntityName = str

IssueType = Literal["Date", "Namespace", "Task Marker", "Settings"]


@dataclass(frozen=True)
class CorpusFile:
    path: str  # vault-relative, "/" separated, e.g. "pages/foo.md"
    basename: str  # file name without the ".md" extension

    @classmethod
    def from_path(cls, path: str) -> CorpusFile:
        name = path.rsplit("/", 1)[-1]
        if name.endswith(".md"):
            name = name[:-3]
        return cls(path=path, basename=name)

    @property
    def parent(self) -> str:
        return self.path.rsplit("/", 1)[0] if "/" in self.path else ""


@dataclass(frozen=True)
class RenameFix:
    new_path: str
    kind: Literal["rename"] = "rename"


@dataclass(frozen=True)
class NamespaceRenameFix:
    new_path: str
    namespace_path: str  # "proj/sub"
    original_name: str  # "proj___sub___page"
    kind: Literal["namespace-rename"] = "namespace-rename"


@dataclass(frozen=True)
class ContentReplaceFix:
    content: str  # content at scan time; the substitution happens on apply
    kind: Literal["content-replace"] = "content-replace"


@dataclass(frozen=True)
class SettingsUpdateFix:
    target: str  # "app" | "daily-notes": <obsidian folder>/<target>.json
    key: str
    value: str
    kind: Literal["settings-update"] = "settings-update"


FixData = Union[RenameFix, NamespaceRenameFix, ContentReplaceFix, SettingsUpdateFix]


@dataclass
class Issue:
    type: IssueType
    description: str
    suggested_fix: str
    fix: FixData | None = None
    file: CorpusFile | None = None  # None for Settings issues

    @property
    def fixable(self) -> bool:
        return self.fix is not None


@dataclass(frozen=True)
class Missing:
    name: EntityName


@dataclass(frozen=True)
class Unique:
    name: EntityName
    file: CorpusFile


@dataclass(frozen=True)
class Ambiguous:
    name: EntityName
    candidates: tuple[CorpusFile, ...]

    @property
    def default(self) -> CorpusFile:
        # first in corpus order, deliberately not sorted
        return self.candidates[0]


Resolution = Union[Missing, Unique, Ambiguous]


class SyncDirection(str, enum.Enum):
    LOGSEQ_TO_OBSIDIAN = "logseq-to-obsidian"
    OBSIDIAN_TO_LOGSEQ = "obsidian-to-logseq"
    BIDIRECTIONAL = "bidirectional"

    @property
    def to_obsidian(self) -> bool:
        return self in (SyncDirection.LOGSEQ_TO_OBSIDIAN, SyncDirection.BIDIRECTIONAL)

    @property
    def to_logseq(self) -> bool:
        return self in (SyncDirection.OBSIDIAN_TO_LOGSEQ, SyncDirection.BIDIRECTIONAL)


@dataclass
class ScanReport:
    issues: list[Issue] = field(default_factory=list)
    files_scanned: int = 0

    @property
    def fixable(self) -> list[Issue]:
        return [i for i in self.issues if i.fix is not None]
