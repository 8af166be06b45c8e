"""Tests for favorites/bookmarks reconciliation."""

import json

import pytest

from vaultbridge.core.errors import StoreNotFoundError, StoreParseError
from vaultbridge.core.model import CorpusFile, SyncDirection
from vaultbridge.core.resolver import build_corpus_index
from vaultbridge.sync import (
    ResolutionChoice,
    apply_direct,
    compute_delta,
    confirm_resolution,
    default_resolution,
    run_sync,
)


def read_bookmarks(corpus, config):
    return json.loads(corpus.read(config.vault.bookmarks_path))


def bookmark_paths(corpus, config):
    return [i["path"] for i in read_bookmarks(corpus, config)["items"]]


def test_compute_delta_logseq_to_obsidian():
    delta = compute_delta({"a", "b", "c"}, {"b", "z"}, SyncDirection.LOGSEQ_TO_OBSIDIAN)
    assert delta.to_add == ["a", "c"]
    assert delta.existing == ["b", "z"]


def test_compute_delta_obsidian_to_logseq():
    delta = compute_delta({"a", "b"}, {"b", "z", "y"}, SyncDirection.OBSIDIAN_TO_LOGSEQ)
    assert delta.to_add == ["y", "z"]
    assert delta.existing == ["a", "b"]


def test_compute_delta_rejects_bidirectional():
    with pytest.raises(ValueError):
        compute_delta(set(), set(), SyncDirection.BIDIRECTIONAL)


def test_apply_direct_buckets():
    files = [CorpusFile.from_path(p) for p in ["p/one.md", "x/dup.md", "y/dup.md", "p/linked.md"]]
    index = build_corpus_index(files)
    result = apply_direct(["one", "dup", "ghost", "linked"], index, {"p/linked.md"})
    assert result.added_count == 1
    assert result.staged_paths == ["p/one.md"]
    assert result.missing == ["ghost"]
    assert [a.name for a in result.ambiguous] == ["dup"]
    assert [c.path for c in result.ambiguous[0].candidates] == ["x/dup.md", "y/dup.md"]


def test_apply_direct_ambiguous_with_linked_candidate_is_silent():
    files = [CorpusFile.from_path(p) for p in ["x/dup.md", "y/dup.md"]]
    result = apply_direct(["dup"], build_corpus_index(files), {"y/dup.md"})
    assert result.added_count == 0
    assert result.ambiguous == []
    assert result.missing == []


def test_sync_unique_favorites(make_vault):
    corpus, config = make_vault(
        {
            "logseq/config.edn": '{:favorites ["x" "y"]}',
            "pages/x.md": "- x",
            "notes/y.md": "- y",
        },
        bookmarks={"items": []},
    )
    result = run_sync(corpus, config)

    assert result.added_count == 2
    assert not result.needs_resolution
    assert sorted(bookmark_paths(corpus, config)) == ["notes/y.md", "pages/x.md"]
    items = read_bookmarks(corpus, config)["items"]
    assert all(i["type"] == "file" and isinstance(i["ctime"], int) for i in items)


def test_sync_is_idempotent(make_vault):
    corpus, config = make_vault(
        {
            "logseq/config.edn": '{:favorites ["x" "y"]}',
            "pages/x.md": "",
            "pages/y.md": "",
        },
        bookmarks={"items": []},
    )
    assert run_sync(corpus, config).added_count == 2
    second = run_sync(corpus, config)
    assert second.added_count == 0
    assert second.up_to_date
    assert len(bookmark_paths(corpus, config)) == 2


def test_sync_ambiguous_then_pick_second(make_vault):
    corpus, config = make_vault(
        {
            "logseq/config.edn": '{:favorites ["dup"]}',
            "a/dup.md": "",
            "b/dup.md": "",
        },
        bookmarks={"items": []},
    )
    result = run_sync(corpus, config)

    assert result.added_count == 0
    assert len(result.ambiguous) == 1
    amb = result.ambiguous[0]
    assert amb.name == "dup"
    assert [c.path for c in amb.candidates] == ["a/dup.md", "b/dup.md"]
    # nothing written before confirmation
    assert bookmark_paths(corpus, config) == []

    choice = default_resolution(result)
    assert choice.ambiguous == {"dup": "a/dup.md"}
    choice.ambiguous["dup"] = amb.candidates[1].path

    outcome = confirm_resolution(corpus, config, choice)
    assert outcome.resolved_count == 1
    assert bookmark_paths(corpus, config) == ["b/dup.md"]


def test_sync_missing_page_created_in_pages_folder(make_vault):
    corpus, config = make_vault(
        {"logseq/config.edn": '{:favorites ["ghost"]}'},
        bookmarks={"items": []},
    )
    result = run_sync(corpus, config)
    assert result.missing == ["ghost"]

    outcome = confirm_resolution(corpus, config, default_resolution(result))
    assert outcome.created_count == 1
    assert outcome.created_paths == ["pages/ghost.md"]
    assert corpus.read("pages/ghost.md") == ""
    assert bookmark_paths(corpus, config) == ["pages/ghost.md"]


def test_sync_missing_page_uses_new_file_folder(make_vault):
    corpus, config = make_vault(
        {
            "logseq/config.edn": '{:favorites ["ghost"]}',
            ".obsidian/app.json": '{"newFileLocation": "folder", "newFileFolderPath": "inbox"}',
        },
        bookmarks={"items": []},
    )
    result = run_sync(corpus, config)
    confirm_resolution(corpus, config, default_resolution(result))
    assert corpus.exists("inbox/ghost.md")
    assert bookmark_paths(corpus, config) == ["inbox/ghost.md"]


def test_confirm_resolution_skipped_missing(make_vault):
    corpus, config = make_vault(
        {"logseq/config.edn": '{:favorites ["ghost"]}'},
        bookmarks={"items": []},
    )
    run_sync(corpus, config)
    outcome = confirm_resolution(corpus, config, ResolutionChoice())
    assert outcome.created_count == 0
    assert not corpus.exists("pages/ghost.md")
    assert bookmark_paths(corpus, config) == []


def test_sync_obsidian_to_logseq(make_vault):
    corpus, config = make_vault(
        {
            "logseq/config.edn": '{:meta/version 1\n :favorites ["x"]}\n',
            "pages/x.md": "",
            "pages/new page.md": "",
        },
        bookmarks={"items": [{"type": "file", "ctime": 1, "path": "pages/new page.md"}]},
    )
    result = run_sync(corpus, config, SyncDirection.OBSIDIAN_TO_LOGSEQ)

    assert result.favorites_added == 1
    assert result.added_count == 0
    assert corpus.read("logseq/config.edn") == '{:meta/version 1\n :favorites ["new page" "x"]}\n'
    assert bookmark_paths(corpus, config) == ["pages/new page.md"]


def test_sync_bidirectional(make_vault):
    corpus, config = make_vault(
        {
            "logseq/config.edn": '{:favorites ["x"]}',
            "pages/x.md": "",
            "pages/y.md": "",
        },
        bookmarks={"items": [{"type": "file", "ctime": 1, "path": "pages/y.md"}]},
    )
    result = run_sync(corpus, config, SyncDirection.BIDIRECTIONAL)

    assert result.added_count == 1
    assert result.favorites_added == 1
    assert sorted(bookmark_paths(corpus, config)) == ["pages/x.md", "pages/y.md"]
    assert corpus.read("logseq/config.edn") == '{:favorites ["x" "y"]}'


def test_sync_missing_config_is_fatal(make_vault):
    corpus, config = make_vault({}, bookmarks={"items": []})
    with pytest.raises(StoreNotFoundError):
        run_sync(corpus, config)


def test_sync_missing_bookmarks_is_fatal(make_vault):
    corpus, config = make_vault({"logseq/config.edn": '{:favorites ["x"]}'})
    with pytest.raises(StoreNotFoundError):
        run_sync(corpus, config)


def test_sync_invalid_bookmarks_writes_nothing(make_vault):
    corpus, config = make_vault(
        {
            "logseq/config.edn": '{:favorites ["x"]}',
            ".obsidian/bookmarks.json": "{broken",
            "pages/x.md": "",
        }
    )
    with pytest.raises(StoreParseError):
        run_sync(corpus, config, SyncDirection.BIDIRECTIONAL)
    assert corpus.read(".obsidian/bookmarks.json") == "{broken"
    assert corpus.read("logseq/config.edn") == '{:favorites ["x"]}'
