"""FastAPI application factory for the status server."""

from __future__ import annotations

from fastapi import FastAPI

from statekeeper.__version__ import __version__
from statekeeper.interfaces.api.status_if import get_state_manager
from statekeeper.interfaces.api.status_if import router as status_router
from statekeeper.services.infrastructure.state_manager_svc import StateManager


def create_api_app(state_manager: StateManager) -> FastAPI:
    """
    Build the status API bound to a StateManager.

    Args:
        state_manager: Facade the endpoints report on

    Returns:
        FastAPI app ready for uvicorn or TestClient
    """
    api_app = FastAPI(title="Statekeeper", version=__version__)
    api_app.include_router(status_router)
    api_app.dependency_overrides[get_state_manager] = lambda: state_manager
    return api_app
