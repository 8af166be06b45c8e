"""Developer preview: run the check and sync classification on a synthetic vault.

Nothing here touches a real vault. The sample vault is read-only, so an
attempt to apply fixes fails item by item with ReadOnlyStoreError.
"""

from dataclasses import dataclass, replace

from .adapters.bookmarks import bookmarked_paths, extract_bookmarked_names, parse_bookmarks
from .adapters.edn_config import extract_favorites
from .adapters.memory_corpus import MemoryCorpus
from .check.apply import FixReport, apply_fixes
from .check.scanner import scan_vault
from .config import BridgeConfig, VaultConfig
from .core.model import ScanReport, SyncDirection
from .core.resolver import build_corpus_index
from .sync.models import DirectResult
from .sync.reconcile import apply_direct, compute_delta

SAMPLE_VAULT: dict[str, str] = {
    "logseq/config.edn": (
        "{:meta/version 1\n"
        ' ;; :favorites ["commented-out"]\n'
        ' :journal/page-title-format "yyyy_MM_dd"\n'
        ' :favorites ["inbox" "project" "someday"]}\n'
    ),
    ".obsidian/bookmarks.json": '{\n  "items": []\n}',
    ".obsidian/app.json": '{\n  "newFileLocation": "root"\n}',
    ".obsidian/daily-notes.json": '{\n  "folder": "daily",\n  "format": "YYYY-MM-DD"\n}',
    "pages/inbox.md": "- TODO sort the inbox\n- DONE set up the vault\n",
    "pages/project.md": "- DOING write the plan\n",
    "archive/project.md": "- old project notes\n",
    "pages/work___clients___acme.md": "- kickoff meeting\n",
    "journals/2024_01_15.md": "- NOW draft the report\n",
    "journals/notes.md": "- loose notes\n",
}


@dataclass
class Simulation:
    corpus: MemoryCorpus
    config: BridgeConfig
    scan: ScanReport
    sync: DirectResult


def sample_corpus() -> MemoryCorpus:
    return MemoryCorpus(SAMPLE_VAULT, read_only=True)


def run_simulation(config: BridgeConfig | None = None) -> Simulation:
    # the sample vault has the default layout; only rule toggles come from config
    config = replace(config or BridgeConfig(), vault=VaultConfig())
    corpus = sample_corpus()
    vc = config.vault

    scan = scan_vault(corpus, config)

    files = list(corpus.list_files())
    by_path = {f.path: f for f in files}
    root = parse_bookmarks(corpus.read(vc.bookmarks_path), vc.bookmarks_path)
    favorites = extract_favorites(corpus.read(vc.logseq_config_path))
    bookmarked = extract_bookmarked_names(root, by_path.get)
    delta = compute_delta(favorites, bookmarked, SyncDirection.LOGSEQ_TO_OBSIDIAN)
    sync = apply_direct(delta.to_add, build_corpus_index(files), bookmarked_paths(root))

    return Simulation(corpus=corpus, config=config, scan=scan, sync=sync)


def simulate_apply(sim: Simulation) -> FixReport:
    """Go through the apply step; every write is refused."""
    return apply_fixes(sim.scan.fixable, sim.corpus, sim.config)
