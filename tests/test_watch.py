"""Tests for watch mode functionality."""

from watchdog.events import (
    DirCreatedEvent,
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from vaultbridge.adapters.memory_corpus import MemoryCorpus
from vaultbridge.config import BridgeConfig, JournalConfig
from vaultbridge.outline import count_non_outline_lines, ensure_journal_bullet
from vaultbridge.watch import DebounceHandler, process_batch


def test_count_non_outline_lines():
    text = "- one\n\t- two\n\nplain\n  - spaces\n-no space\n"
    assert count_non_outline_lines(text) == 3
    assert count_non_outline_lines("") == 0


def test_ensure_journal_bullet():
    assert ensure_journal_bullet("") == "- "
    assert ensure_journal_bullet("hello") == "- hello"
    assert ensure_journal_bullet("- already") == "- already"


def test_process_batch_new_journal_page():
    corpus = MemoryCorpus({"journals/2024-01-15.md": "", "pages/p.md": ""})
    events = process_batch(corpus, BridgeConfig(), {"journals/2024-01-15.md", "pages/p.md"}, set())

    assert corpus.files["journals/2024-01-15.md"] == "- "
    assert corpus.files["pages/p.md"] == ""
    assert events == [
        {"type": "bullet", "path": "journals/2024-01-15.md"},
        {"type": "syntax", "path": "journals/2024-01-15.md", "invalid_lines": 0},
    ]


def test_process_batch_syntax_check():
    corpus = MemoryCorpus({"journals/a.md": "- ok\nstray line\n"})
    events = process_batch(corpus, BridgeConfig(), set(), {"journals/a.md", "journals/gone.md"})

    assert events == [{"type": "syntax", "path": "journals/a.md", "invalid_lines": 1}]
    assert corpus.files["journals/a.md"] == "- ok\nstray line\n"


def test_process_batch_helpers_disabled():
    corpus = MemoryCorpus({"journals/a.md": "text"})
    config = BridgeConfig(journal=JournalConfig(new_page_bullet=False, syntax_check=False))

    assert process_batch(corpus, config, {"journals/a.md"}, set()) == []
    assert corpus.files["journals/a.md"] == "text"


def test_debounce_handler_collects_and_flushes(tmp_path):
    batches = []
    handler = DebounceHandler(tmp_path, lambda c, m: batches.append((c, m)), debounce_ms=0)

    handler.on_created(FileCreatedEvent(str(tmp_path / "journals" / "new.md")))
    handler.on_modified(FileModifiedEvent(str(tmp_path / "journals" / "new.md")))
    handler.on_modified(FileModifiedEvent(str(tmp_path / "pages" / "p.md")))
    handler.on_moved(FileMovedEvent(str(tmp_path / "pages" / "x.md.tmp"), str(tmp_path / "pages" / "x.md")))
    # ignored
    handler.on_created(FileCreatedEvent(str(tmp_path / ".obsidian" / "app.md")))
    handler.on_created(FileCreatedEvent(str(tmp_path / "pages" / "draft.md~")))
    handler.on_created(FileCreatedEvent(str(tmp_path / "pages" / "image.png")))
    handler.on_created(DirCreatedEvent(str(tmp_path / "pages" / "sub.md")))

    handler.check_and_flush()

    assert batches == [({"journals/new.md"}, {"pages/p.md", "pages/x.md"})]
    handler.flush()
    assert len(batches) == 1


def test_debounce_handler_waits(tmp_path):
    batches = []
    handler = DebounceHandler(tmp_path, lambda c, m: batches.append((c, m)), debounce_ms=60_000)

    handler.on_modified(FileModifiedEvent(str(tmp_path / "journals" / "a.md")))
    handler.check_and_flush()
    assert batches == []

    handler.flush()
    assert batches == [(set(), {"journals/a.md"})]
