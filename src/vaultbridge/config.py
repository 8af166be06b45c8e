"""Configuration loader for vaultbridge.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .core.model import SyncDirection


@dataclass
class VaultConfig:
    """Vault layout."""
    root: Path = Path(".")
    logseq_folder: str = "logseq"
    obsidian_folder: str = ".obsidian"
    pages_folder: str = "pages"
    journals_folder: str = "journals"

    @property
    def logseq_config_path(self) -> str:
        return f"{self.logseq_folder}/config.edn"

    @property
    def bookmarks_path(self) -> str:
        return f"{self.obsidian_folder}/bookmarks.json"


@dataclass
class ChecksConfig:
    """Per-rule enable flags for the compatibility check."""
    new_file_folder: bool = True
    new_file_location: bool = True
    daily_folder: bool = True
    daily_format: bool = True
    date: bool = True
    namespace: bool = True
    task_marker: bool = True


@dataclass
class SyncConfig:
    direction: SyncDirection = SyncDirection.LOGSEQ_TO_OBSIDIAN


@dataclass
class JournalConfig:
    """Journal helpers used by the watcher."""
    new_page_bullet: bool = True
    syntax_check: bool = True
    backlink_query: str = '-path:"journals/Journaling"'


@dataclass
class DevConfig:
    tools: bool = False


@dataclass
class BridgeConfig:
    """Complete vaultbridge configuration."""
    vault: VaultConfig = field(default_factory=VaultConfig)
    checks: ChecksConfig = field(default_factory=ChecksConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    journal: JournalConfig = field(default_factory=JournalConfig)
    dev: DevConfig = field(default_factory=DevConfig)


def parse_direction(value: str) -> SyncDirection:
    try:
        return SyncDirection(value)
    except ValueError:
        choices = ", ".join(d.value for d in SyncDirection)
        raise ValueError(f"Unknown sync direction {value!r} (expected one of: {choices})") from None


def load_config(config_path: Path | None = None, vault_path: Path | None = None) -> BridgeConfig:
    """
    Load configuration from vaultbridge.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/vaultbridge.toml
    3. vault_path/vaultbridge.toml

    Args:
        config_path: Explicit path to config file
        vault_path: Vault root path; also overrides [vault].root

    Returns:
        BridgeConfig with defaults filled in
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / "vaultbridge.toml")
    if vault_path:
        search_paths.append(vault_path / "vaultbridge.toml")

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    vault_data = toml_data.get("vault", {})
    defaults = VaultConfig()
    vault_config = VaultConfig(
        root=Path(vault_path or vault_data.get("root", defaults.root)),
        logseq_folder=vault_data.get("logseq_folder", defaults.logseq_folder).strip("/"),
        obsidian_folder=vault_data.get("obsidian_folder", defaults.obsidian_folder).strip("/"),
        pages_folder=vault_data.get("pages_folder", defaults.pages_folder).strip("/"),
        journals_folder=vault_data.get("journals_folder", defaults.journals_folder).strip("/"),
    )

    checks_data = toml_data.get("checks", {})
    checks_config = ChecksConfig(
        **{k: bool(v) for k, v in checks_data.items() if k in ChecksConfig.__dataclass_fields__}
    )

    sync_data = toml_data.get("sync", {})
    sync_config = SyncConfig(
        direction=parse_direction(sync_data.get("direction", SyncDirection.LOGSEQ_TO_OBSIDIAN.value))
    )

    journal_data = toml_data.get("journal", {})
    journal_defaults = JournalConfig()
    journal_config = JournalConfig(
        new_page_bullet=journal_data.get("new_page_bullet", journal_defaults.new_page_bullet),
        syntax_check=journal_data.get("syntax_check", journal_defaults.syntax_check),
        backlink_query=journal_data.get("backlink_query", journal_defaults.backlink_query),
    )

    dev_data = toml_data.get("dev", {})
    dev_config = DevConfig(tools=dev_data.get("tools", False))

    return BridgeConfig(
        vault=vault_config,
        checks=checks_config,
        sync=sync_config,
        journal=journal_config,
        dev=dev_config,
    )
