"""CLI for vaultbridge - keep a Logseq graph usable from Obsidian."""

import argparse
import json
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from ._logging import configure_logging
from .config import parse_direction
from .core.errors import VaultBridgeError
from .core.model import Issue
from .runtime import build_runtime
from .serialize import (
    fix_report_to_dict,
    issue_to_dict,
    resolution_outcome_to_dict,
    sync_result_to_dict,
)


def parse_selection(text: str, issues: list[Issue]) -> list[Issue]:
    """
    Turn "all" or "1,3,5-7" (1-based issue numbers) into the selected issues.

    "all" selects every fixable issue. Order follows the scan order.
    """
    if text.strip().lower() == "all":
        return [i for i in issues if i.fix is not None]

    numbers: set[int] = set()
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        start, sep, end = part.partition("-")
        try:
            lo = int(start)
            hi = int(end) if sep else lo
        except ValueError:
            raise ValueError(f"Invalid issue number: {part!r}") from None
        for n in range(lo, hi + 1):
            if n < 1 or n > len(issues):
                raise ValueError(f"Issue number out of range: {n}")
            numbers.add(n)
    return [issue for n, issue in enumerate(issues, start=1) if n in numbers]


def print_issue(number: int, issue: Issue) -> None:
    marker = " " if issue.fix else "!"
    print(f"{number:3d}{marker} [{issue.type}] {issue.description}")
    print(f"       {issue.suggested_fix}")
    if issue.file:
        print(f"       (File: {issue.file.path})")


def cmd_check(args: argparse.Namespace, rt: Any) -> int:
    """Scan the vault and optionally apply selected fixes."""
    from .check.apply import apply_fixes
    from .check.scanner import scan_vault

    report = scan_vault(rt.corpus, rt.config)

    if not report.issues:
        if args.json:
            print(json.dumps({"issues": [], "files_scanned": report.files_scanned}))
        elif not args.quiet:
            print("Vault check completed. No issues found!")
        return 0

    if args.json and not args.fix:
        print(json.dumps({
            "issues": [issue_to_dict(i, n) for n, i in enumerate(report.issues, start=1)],
            "files_scanned": report.files_scanned,
        }, indent=2))
        return 1

    if not args.quiet and not args.json:
        print(f"Found {len(report.issues)} issues in {report.files_scanned} files:\n")
        for n, issue in enumerate(report.issues, start=1):
            print_issue(n, issue)

    if not args.fix:
        if not args.quiet and not args.json:
            print("\nApply fixes with: vaultbridge check --fix all --confirm (or --fix 1,3,5-7)")
        return 1

    try:
        selected = parse_selection(args.fix, report.issues)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.dry_run:
        for issue in selected:
            where = issue.file.path if issue.file else "settings"
            print(f"[DRY RUN] Would fix [{issue.type}] {where}: {issue.suggested_fix}")
        return 0

    if not args.confirm:
        print("Error: --confirm required to apply fixes", file=sys.stderr)
        return 1

    fixes = apply_fixes(selected, rt.corpus, rt.config, rt.settings)

    if args.json:
        print(json.dumps(fix_report_to_dict(fixes), indent=2))
    elif not args.quiet:
        print(f"\n{fixes.summary()}")
        for failure in fixes.failures:
            where = failure.issue.file.path if failure.issue.file else failure.issue.type
            print(f"  Failed: {where}: {failure.error}", file=sys.stderr)

    return 1 if fixes.failures else 0


def cmd_sync(args: argparse.Namespace, rt: Any) -> int:
    """Sync Logseq favorites with Obsidian bookmarks."""
    from .sync import confirm_resolution, default_resolution, run_sync

    direction = parse_direction(args.direction) if args.direction else None
    result = run_sync(rt.corpus, rt.config, direction)

    if args.json and not args.resolve:
        print(json.dumps(sync_result_to_dict(result), indent=2))
        return 0

    if not args.quiet and not args.json:
        if result.added_count:
            print(f"Synced {result.added_count} unique favorites.")
        if result.favorites_added:
            print(f"Added {result.favorites_added} bookmarks to Logseq favorites.")
        if result.up_to_date:
            print("Bookmarks are up to date.")

    if not result.needs_resolution:
        if args.json:
            print(json.dumps(sync_result_to_dict(result), indent=2))
        return 0

    if not args.resolve:
        if not args.quiet:
            if result.ambiguous:
                print("\nDuplicate matches (default: first path):")
                for amb in result.ambiguous:
                    print(f"  {amb.name}:")
                    for candidate in amb.candidates:
                        print(f"    - {candidate.path}")
            if result.missing:
                print("\nMissing pages (would be created and bookmarked):")
                for name in result.missing:
                    print(f"  {name}")
            print("\nResolve with: vaultbridge sync --resolve [--pick NAME=PATH] [--skip NAME]")
        return 0

    choice = default_resolution(result)
    for pick in args.pick or []:
        name, sep, path = pick.partition("=")
        if not sep or name not in choice.ambiguous:
            print(f"Error: --pick expects NAME=PATH for a duplicate page, got {pick!r}", file=sys.stderr)
            return 1
        candidates = {c.path for a in result.ambiguous if a.name == name for c in a.candidates}
        if path not in candidates:
            print(f"Error: {path} is not a candidate for {name}", file=sys.stderr)
            return 1
        choice.ambiguous[name] = path
    for name in args.skip or []:
        choice.ambiguous.pop(name, None)
        choice.missing.discard(name)

    outcome = confirm_resolution(rt.corpus, rt.config, choice, rt.settings)

    if args.json:
        print(json.dumps({
            "sync": sync_result_to_dict(result),
            "resolution": resolution_outcome_to_dict(outcome),
        }, indent=2))
    elif not args.quiet:
        print(
            f"Synced: {outcome.resolved_count} ambiguous resolved, "
            f"{outcome.created_count} created in default folder."
        )
    return 0


def cmd_watch(args: argparse.Namespace, rt: Any) -> int:
    """Watch journals and apply the journal helpers."""
    from .watch import watch_vault

    return watch_vault(
        corpus=rt.corpus,
        vault_path=rt.corpus.root,
        config=rt.config,
        debounce_ms=args.debounce_ms,
        quiet=args.quiet,
        json_output=args.json,
    )


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start local JSON API server."""
    import uvicorn

    from .api.app import create_app, generate_token

    token_arg = args.token
    if token_arg == "auto":
        token: str | None = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif token_arg == "none":
        print("Warning: Running without authentication. Only use in trusted environments.")
        token = None
    else:
        token = token_arg

    app = create_app(rt, token=token, enable_cors=args.cors)

    print(f"Starting server on http://{args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")
    return 0


def cmd_simulate(args: argparse.Namespace, rt: Any) -> int:
    """Preview check and sync on a synthetic vault (developer tools)."""
    if not rt.config.dev.tools:
        print("Error: developer tools are disabled (set [dev] tools = true)", file=sys.stderr)
        return 1

    from .simulate import run_simulation, simulate_apply

    sim = run_simulation(rt.config)

    if args.json:
        data: dict[str, Any] = {
            "issues": [issue_to_dict(i, n) for n, i in enumerate(sim.scan.issues, start=1)],
            "sync": {
                "added_count": sim.sync.added_count,
                "staged_paths": sim.sync.staged_paths,
                "missing": sim.sync.missing,
                "ambiguous": [
                    {"name": a.name, "candidates": [c.path for c in a.candidates]}
                    for a in sim.sync.ambiguous
                ],
            },
        }
        if args.apply:
            data["apply"] = fix_report_to_dict(simulate_apply(sim))
        print(json.dumps(data, indent=2))
        return 0

    print(f"Simulated vault: {sim.scan.files_scanned} files, {len(sim.scan.issues)} issues\n")
    for n, issue in enumerate(sim.scan.issues, start=1):
        print_issue(n, issue)
    print(f"\nSync preview: {sim.sync.added_count} direct bookmarks")
    for path in sim.sync.staged_paths:
        print(f"  + {path}")
    for amb in sim.sync.ambiguous:
        print(f"  ? {amb.name}: {', '.join(c.path for c in amb.candidates)}")
    for name in sim.sync.missing:
        print(f"  - {name} (missing)")

    if args.apply:
        report = simulate_apply(sim)
        print(f"\n{report.summary()} (simulation is read-only)")
    return 0


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="vaultbridge", description="Logseq/Obsidian vault compatibility tools"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=(
            f"vaultbridge {__version__} "
            f"(python {platform.python_version()}, platform {platform.system().lower()})"
        ),
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/vaultbridge.toml, vault/vaultbridge.toml)",
    )
    parser.add_argument(
        "--vault",
        type=Path,
        default=None,
        help="Path to vault directory (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # check command
    parser_check = subparsers.add_parser("check", help="Check vault compatibility")
    parser_check.add_argument(
        "--fix", default=None,
        help='Issues to fix: "all" or numbers like 1,3,5-7'
    )
    parser_check.add_argument(
        "--dry-run", action="store_true",
        help="List the selected fixes without applying them"
    )
    parser_check.add_argument(
        "--confirm", action="store_true",
        help="Required to apply fixes (unless dry-run)"
    )

    # sync command
    parser_sync = subparsers.add_parser("sync", help="Sync favorites and bookmarks")
    parser_sync.add_argument(
        "--direction", default=None,
        choices=["logseq-to-obsidian", "obsidian-to-logseq", "bidirectional"],
        help="Sync direction (default: from config)"
    )
    parser_sync.add_argument(
        "--resolve", action="store_true",
        help="Bookmark duplicates and create missing pages"
    )
    parser_sync.add_argument(
        "--pick", action="append", metavar="NAME=PATH",
        help="Choose the file for a duplicate page name (repeatable)"
    )
    parser_sync.add_argument(
        "--skip", action="append", metavar="NAME",
        help="Leave a duplicate or missing page alone (repeatable)"
    )

    # watch command
    parser_watch = subparsers.add_parser("watch", help="Watch journals")
    parser_watch.add_argument(
        "--debounce-ms", type=int, default=150,
        help="Debounce window in milliseconds (default: 150)"
    )

    # serve command
    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument("--host", default="127.0.0.1", help="Host (default: 127.0.0.1)")
    parser_serve.add_argument("--port", type=int, default=8765, help="Port (default: 8765)")
    parser_serve.add_argument(
        "--token", default="auto",
        help='Bearer token, "auto" to generate or "none" to disable (default: auto)'
    )
    parser_serve.add_argument("--cors", action="store_true", help="Enable CORS")

    # simulate command
    parser_simulate = subparsers.add_parser(
        "simulate", help="Preview on a synthetic vault (developer tools)"
    )
    parser_simulate.add_argument(
        "--apply", action="store_true",
        help="Also run the apply step (all writes are refused)"
    )

    args = parser.parse_args()
    configure_logging()

    handlers = {
        "check": cmd_check,
        "sync": cmd_sync,
        "watch": cmd_watch,
        "serve": cmd_serve,
        "simulate": cmd_simulate,
    }
    handler = handlers.get(args.cmd)
    if handler is None:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)

    try:
        rt = build_runtime(vault_path=args.vault, config_path=args.config)
        sys.exit(handler(args, rt))
    except (VaultBridgeError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
