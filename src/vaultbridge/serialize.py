"""JSON-friendly views of scan, fix and sync results (CLI --json and the API)."""

from dataclasses import asdict
from typing import Any

from .check.apply import FixReport
from .core.model import Issue
from .sync.models import ResolutionOutcome, SyncResult


def issue_to_dict(issue: Issue, number: int | None = None) -> dict[str, Any]:
    data: dict[str, Any] = {
        "type": issue.type,
        "file": issue.file.path if issue.file else None,
        "description": issue.description,
        "suggested_fix": issue.suggested_fix,
        "fix": asdict(issue.fix) if issue.fix else None,
    }
    if number is not None:
        data = {"number": number, **data}
    return data


def fix_report_to_dict(report: FixReport) -> dict[str, Any]:
    return {
        "renames": report.renames,
        "content_fixes": report.content_fixes,
        "settings_updates": report.settings_updates,
        "skipped": report.skipped,
        "unchanged": report.unchanged,
        "failures": [
            {
                "type": f.issue.type,
                "file": f.issue.file.path if f.issue.file else None,
                "error": f.error,
            }
            for f in report.failures
        ],
    }


def sync_result_to_dict(result: SyncResult) -> dict[str, Any]:
    return {
        "direction": result.direction.value,
        "added_count": result.added_count,
        "favorites_added": result.favorites_added,
        "missing": list(result.missing),
        "ambiguous": [
            {"name": a.name, "candidates": [c.path for c in a.candidates]}
            for a in result.ambiguous
        ],
        "up_to_date": result.up_to_date,
    }


def resolution_outcome_to_dict(outcome: ResolutionOutcome) -> dict[str, Any]:
    return {
        "resolved_count": outcome.resolved_count,
        "created_count": outcome.created_count,
        "created_paths": list(outcome.created_paths),
    }
