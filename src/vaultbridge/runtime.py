"""Runtime wiring helper for CLI and API."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_corpus import FsCorpus
from .adapters.json_settings import SettingsReader
from .config import BridgeConfig, load_config


@dataclass
class Runtime:
    """Container for all wired components."""
    corpus: FsCorpus
    settings: SettingsReader
    config: BridgeConfig


def build_runtime(
    vault_path: Path | None = None,
    config_path: Path | None = None,
) -> Runtime:
    """Build and wire all components for a vault."""
    config = load_config(config_path=config_path, vault_path=vault_path)

    corpus = FsCorpus(config.vault.root)
    settings = SettingsReader(corpus, config.vault.obsidian_folder)

    return Runtime(corpus=corpus, settings=settings, config=config)
