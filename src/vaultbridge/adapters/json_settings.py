"""Obsidian JSON settings (app.json, daily-notes.json)."""

import json
import logging
from typing import Any

from ..core.ports import CorpusStore, LiveSettingsSource

log = logging.getLogger(__name__)


class SettingsReader:
    """
    Look up one setting at a time.

    The live source (the running application's loaded settings) wins when
    it answers; otherwise the serialized ``<obsidian folder>/<target>.json``
    is read. Any failure along the way degrades to ``None``.
    """

    def __init__(
        self,
        corpus: CorpusStore,
        obsidian_folder: str,
        live: LiveSettingsSource | None = None,
    ):
        self.corpus = corpus
        self.obsidian_folder = obsidian_folder
        self.live = live

    def path_for(self, target: str) -> str:
        return f"{self.obsidian_folder}/{target}.json"

    def get(self, target: str, key: str) -> Any:
        if self.live is not None:
            try:
                value = self.live.get(target, key)
            except Exception as e:
                log.debug("Live settings unavailable for %s.%s: %s", target, key, e)
            else:
                if value is not None:
                    return value
        return self.load(target).get(key)

    def load(self, target: str) -> dict[str, Any]:
        path = self.path_for(target)
        try:
            if not self.corpus.exists(path):
                return {}
            data = json.loads(self.corpus.read(path))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            log.debug("Ignoring unreadable settings file %s: %s", path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def update(self, target: str, key: str, value: Any) -> None:
        """Set one key, keeping every other key already in the file."""
        data = self.load(target)
        data[key] = value
        self.corpus.write(self.path_for(target), json.dumps(data, indent=2, ensure_ascii=False))

    def new_file_folder(self, default: str) -> str:
        if self.get("app", "newFileLocation") == "folder":
            folder = self.get("app", "newFileFolderPath")
            if folder:
                return str(folder).strip("/")
        return default
