import json
from pathlib import Path

import pytest

from vaultbridge.adapters.fs_corpus import FsCorpus
from vaultbridge.config import BridgeConfig, VaultConfig


def write_files(root: Path, files: dict[str, str]) -> None:
    for rel, text in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")


@pytest.fixture
def make_vault(tmp_path):
    """Create a vault on disk; returns (corpus, config)."""

    def _make(files: dict[str, str], bookmarks: dict | None = None):
        root = tmp_path / "vault"
        root.mkdir(exist_ok=True)
        write_files(root, files)
        if bookmarks is not None:
            write_files(root, {".obsidian/bookmarks.json": json.dumps(bookmarks, indent=2)})
        config = BridgeConfig(vault=VaultConfig(root=root))
        return FsCorpus(root), config

    return _make
