"""Reconcile Logseq favorites with Obsidian bookmarks."""

import logging
from typing import Iterable

from ..adapters.bookmarks import (
    append_bookmark,
    bookmarked_paths,
    dump_bookmarks,
    extract_bookmarked_names,
    parse_bookmarks,
)
from ..adapters.edn_config import extract_favorites, merge_favorites
from ..adapters.json_settings import SettingsReader
from ..config import BridgeConfig
from ..core.errors import StoreNotFoundError
from ..core.model import Ambiguous, Missing, SyncDirection, Unique
from ..core.ports import CorpusStore
from ..core.resolver import CorpusIndex, build_corpus_index, resolve
from .models import Delta, DirectResult, ResolutionChoice, ResolutionOutcome, SyncResult

log = logging.getLogger(__name__)


def compute_delta(favorites: set[str], bookmarked: set[str], direction: SyncDirection) -> Delta:
    """
    Set difference for one viewing direction.

    LOGSEQ_TO_OBSIDIAN looks from the bookmark side (favorites not yet
    bookmarked), OBSIDIAN_TO_LOGSEQ from the favorites side.
    """
    if direction is SyncDirection.LOGSEQ_TO_OBSIDIAN:
        this, other = bookmarked, favorites
    elif direction is SyncDirection.OBSIDIAN_TO_LOGSEQ:
        this, other = favorites, bookmarked
    else:
        raise ValueError("compute_delta needs a single direction")
    return Delta(to_add=sorted(other - this), existing=sorted(this))


def apply_direct(
    names: Iterable[str], index: CorpusIndex, already_linked: set[str]
) -> DirectResult:
    """Stage every name that maps to exactly one file; collect the rest for the user."""
    result = DirectResult()
    for name in names:
        resolution = resolve(name, index, already_linked)
        if isinstance(resolution, Unique):
            path = resolution.file.path
            if path in already_linked or path in result.staged_paths:
                continue
            result.staged_paths.append(path)
            result.added_count += 1
        elif isinstance(resolution, Missing):
            result.missing.append(name)
        elif isinstance(resolution, Ambiguous):
            result.ambiguous.append(resolution)
    return result


def _require(corpus: CorpusStore, path: str, what: str) -> None:
    if not corpus.exists(path):
        raise StoreNotFoundError(what, path)


def _write_bookmarks(corpus: CorpusStore, path: str, paths: Iterable[str]) -> int:
    # re-read right before writing to narrow the lost-update window
    root = parse_bookmarks(corpus.read(path), path)
    added = sum(1 for p in paths if append_bookmark(root, p))
    if added:
        corpus.write(path, dump_bookmarks(root))
    return added


def _write_favorites(corpus: CorpusStore, path: str, names: Iterable[str]) -> None:
    text = corpus.read(path)
    corpus.write(path, merge_favorites(text, names))


def run_sync(
    corpus: CorpusStore,
    config: BridgeConfig,
    direction: SyncDirection | None = None,
) -> SyncResult:
    """
    Sync favorites and bookmarks.

    Unambiguous additions are written straight away. Missing and ambiguous
    names are returned for the user to settle with confirm_resolution().

    Raises:
        StoreNotFoundError: config.edn or bookmarks.json does not exist
        StoreParseError: bookmarks.json is not a JSON object
    """
    vc = config.vault
    direction = direction or config.sync.direction
    config_path = vc.logseq_config_path
    bookmarks_path = vc.bookmarks_path

    _require(corpus, config_path, "Logseq config")
    _require(corpus, bookmarks_path, "Obsidian bookmarks")

    config_text = corpus.read(config_path)
    root = parse_bookmarks(corpus.read(bookmarks_path), bookmarks_path)

    files = list(corpus.list_files())
    index = build_corpus_index(files)
    by_path = {f.path: f for f in files}

    favorites = extract_favorites(config_text)
    bookmarked = extract_bookmarked_names(root, by_path.get)
    log.debug("%d favorites, %d bookmarked pages", len(favorites), len(bookmarked))

    result = SyncResult(direction=direction)

    if direction.to_obsidian:
        delta = compute_delta(favorites, bookmarked, SyncDirection.LOGSEQ_TO_OBSIDIAN)
        direct = apply_direct(delta.to_add, index, bookmarked_paths(root))
        if direct.staged_paths:
            result.added_count = _write_bookmarks(corpus, bookmarks_path, direct.staged_paths)
            log.info("Added %d bookmarks", result.added_count)
        result.missing = direct.missing
        result.ambiguous = direct.ambiguous

    if direction.to_logseq:
        delta = compute_delta(favorites, bookmarked, SyncDirection.OBSIDIAN_TO_LOGSEQ)
        if delta.to_add:
            _write_favorites(corpus, config_path, delta.to_add)
            result.favorites_added = len(delta.to_add)
            log.info("Added %d favorites", result.favorites_added)

    return result


def default_resolution(result: SyncResult) -> ResolutionChoice:
    """Preselection shown to the user: create every missing page, first candidate for duplicates."""
    return ResolutionChoice(
        ambiguous={a.name: a.default.path for a in result.ambiguous},
        missing=set(result.missing),
    )


def confirm_resolution(
    corpus: CorpusStore,
    config: BridgeConfig,
    choice: ResolutionChoice,
    settings: SettingsReader | None = None,
) -> ResolutionOutcome:
    """
    Bookmark the user's picks and create the selected missing pages.

    New pages go to the configured new-file folder and start empty.
    """
    vc = config.vault
    bookmarks_path = vc.bookmarks_path
    _require(corpus, bookmarks_path, "Obsidian bookmarks")
    if settings is None:
        settings = SettingsReader(corpus, vc.obsidian_folder)

    root = parse_bookmarks(corpus.read(bookmarks_path), bookmarks_path)
    outcome = ResolutionOutcome()

    for name, path in choice.ambiguous.items():
        if append_bookmark(root, path):
            outcome.resolved_count += 1
        else:
            log.debug("%s: %s is already bookmarked", name, path)

    folder = settings.new_file_folder(vc.pages_folder)
    for name in sorted(choice.missing):
        target = f"{folder}/{name}.md" if folder else f"{name}.md"
        if not corpus.exists(target):
            corpus.create(target, "")
            outcome.created_paths.append(target)
        if append_bookmark(root, target):
            outcome.created_count += 1

    if outcome.resolved_count or outcome.created_count:
        corpus.write(bookmarks_path, dump_bookmarks(root))
        log.info(
            "Resolved %d duplicates, created %d pages",
            outcome.resolved_count,
            outcome.created_count,
        )
    return outcome
