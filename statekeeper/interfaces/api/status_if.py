"""Status endpoints for health probes and operators."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse

from statekeeper.interfaces.api.types.state_types import AppStatusResponse
from statekeeper.services.infrastructure.state_manager_svc import StateManager

router = APIRouter(prefix="", tags=["Status"])

# Status details are only served to internal networks and the local host
LOCAL_ADDRESS_PREFIXES = ("10.", "127.")


# ──────────────────────────────────────────────────────────────────────
# Dependencies
# ──────────────────────────────────────────────────────────────────────


def get_state_manager() -> StateManager:
    """Get the StateManager. Overridden by create_api_app()."""
    raise HTTPException(status_code=503, detail="State manager not available")


def verify_local_client(request: Request) -> None:
    """Reject clients outside the local/internal address ranges."""
    host = request.client.host if request.client else ""
    if not host.startswith(LOCAL_ADDRESS_PREFIXES):
        raise HTTPException(status_code=403, detail="Forbidden")


# ──────────────────────────────────────────────────────────────────────
# Endpoints
# ──────────────────────────────────────────────────────────────────────


@router.get("/status", response_class=PlainTextResponse, dependencies=[Depends(verify_local_client)])
def status_report(
    state_manager: StateManager = Depends(get_state_manager),
) -> str:
    """Plain text status report (same format as the app-state file)."""
    return state_manager.get_status_report()


@router.get("/status/json", dependencies=[Depends(verify_local_client)])
def status_json(
    state_manager: StateManager = Depends(get_state_manager),
) -> AppStatusResponse:
    """Application and HA state as JSON."""
    return AppStatusResponse.from_state_manager(state_manager)
