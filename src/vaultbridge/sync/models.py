"""Data models for favorites/bookmarks synchronisation."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..core.model import Ambiguous, SyncDirection


@dataclass
class Delta:
    """One direction of the comparison between the two name sets."""

    to_add: list[str] = field(default_factory=list)  # other side's names missing here
    existing: list[str] = field(default_factory=list)  # names this side already has


@dataclass
class DirectResult:
    """Outcome of classifying candidate names for the bookmark store."""

    added_count: int = 0
    staged_paths: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    ambiguous: list[Ambiguous] = field(default_factory=list)


@dataclass
class SyncResult:
    """What one sync run wrote, and what is left for the user to decide."""

    direction: SyncDirection
    added_count: int = 0  # bookmarks written directly
    favorites_added: int = 0  # names merged into config.edn
    missing: list[str] = field(default_factory=list)
    ambiguous: list[Ambiguous] = field(default_factory=list)

    @property
    def needs_resolution(self) -> bool:
        return bool(self.missing or self.ambiguous)

    @property
    def up_to_date(self) -> bool:
        return not (self.added_count or self.favorites_added or self.needs_resolution)


@dataclass
class ResolutionChoice:
    """The user's answers for the pending part of a sync."""

    ambiguous: dict[str, str] = field(default_factory=dict)  # page name -> chosen path
    missing: set[str] = field(default_factory=set)  # page names to create


@dataclass
class ResolutionOutcome:
    resolved_count: int = 0
    created_count: int = 0
    created_paths: list[str] = field(default_factory=list)
