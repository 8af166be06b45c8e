"""Favorites (config.edn) <-> bookmarks (bookmarks.json) synchronisation."""

from .models import Delta, DirectResult, ResolutionChoice, ResolutionOutcome, SyncResult
from .reconcile import (
    apply_direct,
    compute_delta,
    confirm_resolution,
    default_resolution,
    run_sync,
)

__all__ = [
    "Delta",
    "DirectResult",
    "ResolutionChoice",
    "ResolutionOutcome",
    "SyncResult",
    "apply_direct",
    "compute_delta",
    "confirm_resolution",
    "default_resolution",
    "run_sync",
]
