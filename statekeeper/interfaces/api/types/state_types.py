"""State API types - Pydantic models for status endpoints.

External API contracts for status endpoints.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from statekeeper.helpers.dto.state_dto import FacetSnapshot
    from statekeeper.services.infrastructure.state_manager_svc import StateManager


class FacetStatusResponse(BaseModel):
    """State of one registered facet."""

    name: str = Field(..., description="Sanitized facet name")
    state: str = Field(..., description="Facet state (INITIALIZING, READY, WARNING, FAULTY)")
    annotation: str = Field("", description="Free-text explanation of the state")

    @classmethod
    def from_dto(cls, dto: FacetSnapshot) -> FacetStatusResponse:
        """Convert FacetSnapshot DTO to Pydantic response model."""
        return cls(name=dto.name, state=dto.state.name, annotation=dto.annotation)


class AppStatusResponse(BaseModel):
    """Response for the JSON status endpoint."""

    app_state: str = Field(..., description="Aggregate application state")
    app_state_number: int = Field(..., description="Severity weight of the application state")
    app_usable: bool = Field(..., description="Whether the application should receive traffic")
    ha_state: str = Field(..., description="HA role (MASTER, BACKUP, FAULT)")
    ha_healthy: bool = Field(..., description="Whether the HA role is MASTER or BACKUP")
    facets: list[FacetStatusResponse] = Field(default_factory=list, description="Per-facet states")

    @classmethod
    def from_state_manager(cls, state_manager: StateManager) -> AppStatusResponse:
        """Build the response from a single application state poll."""
        app_state = state_manager.get_app_state()
        ha_state = state_manager.get_ha_state()
        return cls(
            app_state=app_state.name,
            app_state_number=app_state.weight,
            app_usable=app_state.usable,
            ha_state=ha_state.name,
            ha_healthy=ha_state.healthy,
            facets=[FacetStatusResponse.from_dto(s) for s in state_manager.get_facet_snapshots()],
        )
