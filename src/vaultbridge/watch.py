"""Watch mode: journal helpers driven by file-system events."""

import json
import logging
import signal
import sys
import time
from pathlib import Path
from typing import Any, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .config import BridgeConfig
from .core.ports import CorpusStore
from .outline import count_non_outline_lines, ensure_journal_bullet

log = logging.getLogger(__name__)


class DebounceHandler(FileSystemEventHandler):
    """File system event handler with debouncing."""

    def __init__(
        self,
        vault_path: Path,
        on_batch: Callable[[set[str], set[str]], Any],
        debounce_ms: int = 150,
    ):
        super().__init__()
        self.vault_path = vault_path
        self.on_batch = on_batch
        self.debounce_ms = debounce_ms

        # pending changes by vault-relative path
        self.created: set[str] = set()
        self.modified: set[str] = set()
        self.last_event_time = 0.0

    def _relative(self, src_path: str) -> str | None:
        path = Path(src_path)
        try:
            rel = path.relative_to(self.vault_path)
        except ValueError:
            return None

        name = path.name
        if any(part.startswith(".") for part in rel.parts):
            return None
        if name.endswith("~") or name.endswith(".swp") or name.endswith(".tmp"):
            return None
        if not name.endswith(".md"):
            return None
        return rel.as_posix()

    def on_created(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        rel = self._relative(str(event.src_path))
        if rel:
            self.created.add(rel)
            self.last_event_time = time.time()

    def on_modified(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        rel = self._relative(str(event.src_path))
        if rel:
            self.modified.add(rel)
            self.last_event_time = time.time()

    def on_moved(self, event: FileSystemEvent) -> None:
        # editors that save through a temp file show up as moves
        if event.is_directory:
            return
        rel = self._relative(str(event.dest_path))
        if rel:
            self.modified.add(rel)
            self.last_event_time = time.time()

    def check_and_flush(self) -> None:
        """Flush once the debounce period has elapsed."""
        if not (self.created or self.modified):
            return
        elapsed = (time.time() - self.last_event_time) * 1000
        if elapsed >= self.debounce_ms:
            self.flush()

    def flush(self) -> None:
        if not (self.created or self.modified):
            return
        created = set(self.created)
        modified = self.modified - created
        self.created.clear()
        self.modified.clear()
        if self.on_batch:
            self.on_batch(created, modified)


def process_batch(
    corpus: CorpusStore,
    config: BridgeConfig,
    created: set[str],
    modified: set[str],
) -> list[dict[str, Any]]:
    """
    Handle one batch of journal changes.

    New journal pages get a leading "- " bullet; changed journal pages are
    checked for lines outside the outline structure.

    Returns:
        One event dict per action taken
    """
    journals = config.vault.journals_folder + "/"
    events: list[dict[str, Any]] = []

    for path in sorted(created):
        if not path.startswith(journals) or not config.journal.new_page_bullet:
            continue
        if not corpus.exists(path):
            continue
        text = corpus.read(path)
        updated = ensure_journal_bullet(text)
        if updated != text:
            corpus.write(path, updated)
            events.append({"type": "bullet", "path": path})

    if config.journal.syntax_check:
        for path in sorted(created | modified):
            if not path.startswith(journals) or not corpus.exists(path):
                continue
            invalid = count_non_outline_lines(corpus.read(path))
            events.append({"type": "syntax", "path": path, "invalid_lines": invalid})

    return events


def watch_vault(
    corpus: CorpusStore,
    vault_path: Path,
    config: BridgeConfig,
    debounce_ms: int = 150,
    quiet: bool = False,
    json_output: bool = False,
) -> int:
    """
    Watch the vault and apply the journal helpers until interrupted.

    Args:
        corpus: Vault storage
        vault_path: Directory to observe
        config: Configuration (journal folder and helper toggles)
        debounce_ms: Debounce window in milliseconds
        quiet: Suppress output
        json_output: Output JSON events instead of human-readable

    Returns:
        Exit code
    """
    if not vault_path.exists():
        print(f"Error: Vault not found: {vault_path}", file=sys.stderr)
        return 1

    running = True

    def handle_batch(created: set[str], modified: set[str]) -> None:
        try:
            events = process_batch(corpus, config, created, modified)
        except Exception as e:
            log.exception("Failed to process batch")
            if json_output:
                print(json.dumps({"type": "error", "message": str(e)}), flush=True)
            return

        for event in events:
            if json_output:
                print(json.dumps(event), flush=True)
            elif quiet:
                continue
            elif event["type"] == "bullet":
                print(f"Added bullet: {event['path']}", flush=True)
            elif event["invalid_lines"]:
                print(f"{event['path']}: {event['invalid_lines']} lines outside bullets", flush=True)
            else:
                print(f"{event['path']}: OK", flush=True)

    def signal_handler(signum: int, frame: Any) -> None:
        nonlocal running
        running = False
        if not quiet and not json_output:
            print("\nShutting down...", flush=True)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    handler = DebounceHandler(vault_path.resolve(), handle_batch, debounce_ms)
    observer = Observer()
    observer.schedule(handler, str(vault_path.resolve()), recursive=True)

    if not quiet and not json_output:
        print(f"Watching {vault_path} (debounce: {debounce_ms}ms)", flush=True)
        print("Press Ctrl+C to stop", flush=True)

    observer.start()
    try:
        while running:
            time.sleep(0.1)
            handler.check_and_flush()
    finally:
        handler.flush()
        observer.stop()
        observer.join()

    if not quiet and not json_output:
        print("Watch stopped", flush=True)

    return 0
