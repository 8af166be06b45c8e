"""Run the compatibility rules over a vault."""

import logging

from ..adapters.json_settings import SettingsReader
from ..config import BridgeConfig
from ..core.model import ScanReport
from ..core.ports import CorpusStore, LiveSettingsSource
from .rules import FILE_RULES, SETTINGS_RULES, FileRule, ScanContext, SettingsRule

log = logging.getLogger(__name__)


def enabled_rules(config: BridgeConfig) -> tuple[list[SettingsRule], list[FileRule]]:
    settings_rules = [r for r in SETTINGS_RULES if getattr(config.checks, r.toggle)]
    file_rules = [r for r in FILE_RULES if getattr(config.checks, r.toggle)]
    return settings_rules, file_rules


def scan_vault(
    corpus: CorpusStore,
    config: BridgeConfig,
    live: LiveSettingsSource | None = None,
) -> ScanReport:
    """
    Check the vault for Logseq/Obsidian incompatibilities.

    Issue order is stable: settings issues in rule order, then per file
    (corpus order) date, namespace and task-marker issues.

    Args:
        corpus: Vault storage
        config: Loaded configuration (rule toggles, folder names)
        live: Optional live settings of the running application

    Returns:
        ScanReport with the issues found
    """
    ctx = ScanContext(
        corpus=corpus,
        config=config,
        settings=SettingsReader(corpus, config.vault.obsidian_folder, live),
    )
    settings_rules, file_rules = enabled_rules(config)
    report = ScanReport()

    for rule in settings_rules:
        report.issues.extend(rule.check(ctx))

    for file in corpus.list_files():
        report.files_scanned += 1
        for rule in file_rules:
            try:
                report.issues.extend(rule.check(file, ctx))
            except (OSError, UnicodeDecodeError) as e:
                log.warning("Skipping %s for %s: %s", rule.id, file.path, e)

    log.info("Scanned %d files, %d issues", report.files_scanned, len(report.issues))
    return report
