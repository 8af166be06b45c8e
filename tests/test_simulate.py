"""Tests for the synthetic-vault preview."""

import pytest

from vaultbridge.config import BridgeConfig, ChecksConfig, VaultConfig
from vaultbridge.core.errors import ReadOnlyStoreError
from vaultbridge.simulate import SAMPLE_VAULT, run_simulation, sample_corpus, simulate_apply


def test_scan_of_sample_vault():
    sim = run_simulation()

    assert sim.scan.files_scanned == 6
    assert [i.type for i in sim.scan.issues] == [
        "Settings",
        "Settings",
        "Settings",
        "Settings",
        "Task Marker",
        "Task Marker",
        "Namespace",
        "Date",
        "Task Marker",
        "Date",
    ]
    assert len(sim.scan.fixable) == 9


def test_sync_preview_of_sample_vault():
    sim = run_simulation()

    assert sim.sync.added_count == 1
    assert sim.sync.staged_paths == ["pages/inbox.md"]
    assert sim.sync.missing == ["someday"]
    assert [a.name for a in sim.sync.ambiguous] == ["project"]
    assert [c.path for c in sim.sync.ambiguous[0].candidates] == ["pages/project.md", "archive/project.md"]


def test_apply_is_refused_item_by_item():
    sim = run_simulation()
    report = simulate_apply(sim)

    assert report.applied == 0
    assert len(report.failures) == 9
    assert sim.corpus.files == SAMPLE_VAULT


def test_sample_corpus_is_read_only():
    with pytest.raises(ReadOnlyStoreError):
        sample_corpus().write("pages/x.md", "x")


def test_custom_vault_layout_does_not_affect_sample():
    config = BridgeConfig(
        vault=VaultConfig(obsidian_folder="cfg", logseq_folder="ls", pages_folder="wiki"),
        checks=ChecksConfig(task_marker=False),
    )
    sim = run_simulation(config)

    assert sim.config.vault == VaultConfig()
    assert "Task Marker" not in [i.type for i in sim.scan.issues]
    assert sim.sync.staged_paths == ["pages/inbox.md"]
