"""Vault compatibility check and fixes."""

from .apply import FixReport, apply_fixes
from .scanner import scan_vault

__all__ = [
    "FixReport",
    "apply_fixes",
    "scan_vault",
]
