"""FastAPI application: the check and sync flows over a local JSON API.

Each POST /check or POST /sync that needs a follow-up opens a session held
in memory. The follow-up call consumes it; a session is never re-scanned.
"""

import secrets
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from .. import __version__
from ..check.apply import apply_fixes
from ..check.scanner import scan_vault
from ..config import parse_direction
from ..core.errors import StoreNotFoundError, StoreParseError
from ..core.model import ScanReport
from ..serialize import (
    fix_report_to_dict,
    issue_to_dict,
    resolution_outcome_to_dict,
    sync_result_to_dict,
)
from ..sync import confirm_resolution, default_resolution, run_sync
from ..sync.models import SyncResult

MAX_SESSIONS = 32


class ApplyRequest(BaseModel):
    numbers: list[int] = Field(default_factory=list, description="1-based issue numbers")
    all: bool = Field(False, description="Apply every fixable issue")


class SyncRequest(BaseModel):
    direction: str | None = None


class ResolveRequest(BaseModel):
    pick: dict[str, str] = Field(default_factory=dict, description="page name -> chosen path")
    skip: list[str] = Field(default_factory=list, description="page names to leave alone")


def _remember(store: dict[str, Any], session: str, value: Any, limit: int) -> None:
    """Keep at most `limit` open sessions; the oldest is dropped first."""
    store[session] = value
    while len(store) > limit:
        del store[next(iter(store))]


def create_app(
    runtime: Any,
    token: str | None = None,
    enable_cors: bool = False,
    max_sessions: int = MAX_SESSIONS,
) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with corpus, settings and config
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware
        max_sessions: Open check and sync sessions kept per kind

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="vaultbridge API",
        description="Local JSON API for Logseq/Obsidian vault compatibility",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    scans: dict[str, ScanReport] = {}
    syncs: dict[str, SyncResult] = {}

    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

    @app.get("/health")
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.post("/check")
    def check(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Scan the vault and open a fix session."""
        report = scan_vault(runtime.corpus, runtime.config)
        session = None
        if report.fixable:
            session = secrets.token_hex(8)
            _remember(scans, session, report, max_sessions)
        return {
            "session": session,
            "files_scanned": report.files_scanned,
            "issues": [issue_to_dict(i, n) for n, i in enumerate(report.issues, start=1)],
        }

    @app.post("/check/{session}/apply")
    def apply(session: str, body: ApplyRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Apply selected fixes from a scan session; the session is consumed."""
        report = scans.pop(session, None)
        if report is None:
            raise HTTPException(status_code=404, detail=f"Unknown check session {session}")
        if body.all:
            selected = report.fixable
        else:
            bad = [n for n in body.numbers if n < 1 or n > len(report.issues)]
            if bad:
                _remember(scans, session, report, max_sessions)
                raise HTTPException(status_code=422, detail=f"Issue numbers out of range: {bad}")
            wanted = set(body.numbers)
            selected = [i for n, i in enumerate(report.issues, start=1) if n in wanted]
        fixes = apply_fixes(selected, runtime.corpus, runtime.config, runtime.settings)
        return fix_report_to_dict(fixes)

    @app.post("/sync")
    def sync(body: SyncRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Run a sync; duplicates and missing pages open a resolve session."""
        try:
            direction = parse_direction(body.direction) if body.direction else None
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from None
        try:
            result = run_sync(runtime.corpus, runtime.config, direction)
        except StoreNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from None
        except StoreParseError as e:
            raise HTTPException(status_code=422, detail=str(e)) from None

        session = None
        if result.needs_resolution:
            session = secrets.token_hex(8)
            _remember(syncs, session, result, max_sessions)
        return {"session": session, **sync_result_to_dict(result)}

    @app.post("/sync/{session}/resolve")
    def resolve(session: str, body: ResolveRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Confirm the pending part of a sync; the session is consumed."""
        result = syncs.pop(session, None)
        if result is None:
            raise HTTPException(status_code=404, detail=f"Unknown sync session {session}")

        choice = default_resolution(result)
        candidates = {a.name: {c.path for c in a.candidates} for a in result.ambiguous}
        for name, path in body.pick.items():
            if path not in candidates.get(name, set()):
                _remember(syncs, session, result, max_sessions)
                raise HTTPException(status_code=422, detail=f"{path} is not a candidate for {name}")
            choice.ambiguous[name] = path
        for name in body.skip:
            choice.ambiguous.pop(name, None)
            choice.missing.discard(name)

        try:
            outcome = confirm_resolution(runtime.corpus, runtime.config, choice, runtime.settings)
        except (StoreNotFoundError, StoreParseError) as e:
            raise HTTPException(status_code=409, detail=str(e)) from None
        return resolution_outcome_to_dict(outcome)

    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
