"""
State manager service - single accessor surface over application and HA state.

Consumers (status endpoint, telemetry, application code) talk to StateManager
only. It delegates to AppStateManager and HaStateManager and owns the
lifecycle of the periodic tasks thread.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from statekeeper.components.state.facets_comp import AppStatePushFacet
    from statekeeper.helpers.dto.state_dto import AppState, AppStateFacet, FacetSnapshot, HaState
    from statekeeper.services.infrastructure.app_state_svc import AppStateManager
    from statekeeper.services.infrastructure.ha_state_svc import HaStateManager
    from statekeeper.services.infrastructure.periodic_tasks_svc import PeriodicTasksRunner


class StateManager:
    """Facade over application state, HA state and the periodic tasks runner."""

    def __init__(
        self,
        app_state_manager: AppStateManager,
        ha_state_manager: HaStateManager,
        periodic_tasks_runner: PeriodicTasksRunner,
    ) -> None:
        self.app_state_manager = app_state_manager
        self.ha_state_manager = ha_state_manager
        self.periodic_tasks_runner = periodic_tasks_runner

    # ------------------------------ HA state ---------------------------------

    def get_ha_state(self) -> HaState:
        return self.ha_state_manager.get_ha_state()

    def is_ha_master(self) -> bool:
        return self.ha_state_manager.is_ha_master()

    def is_ha_backup(self) -> bool:
        return self.ha_state_manager.is_ha_backup()

    def is_ha_fault(self) -> bool:
        return self.ha_state_manager.is_ha_fault()

    def is_ha_healthy(self) -> bool:
        return self.ha_state_manager.is_ha_healthy()

    def is_ha_unhealthy(self) -> bool:
        return self.ha_state_manager.is_ha_unhealthy()

    # --------------------------- Application state ---------------------------

    def set_main_app_state(self, state: AppState | None) -> None:
        self.app_state_manager.set_main_app_state(state)

    def get_app_state(self) -> AppState:
        return self.app_state_manager.get_app_state()

    def is_app_initializing(self) -> bool:
        return self.app_state_manager.is_app_initializing()

    def is_app_ready(self) -> bool:
        return self.app_state_manager.is_app_ready()

    def is_app_warning(self) -> bool:
        return self.app_state_manager.is_app_warning()

    def is_app_faulty(self) -> bool:
        return self.app_state_manager.is_app_faulty()

    def is_app_usable(self) -> bool:
        return self.app_state_manager.is_app_usable()

    def is_app_unusable(self) -> bool:
        return self.app_state_manager.is_app_unusable()

    def get_status_report(self) -> str:
        return self.app_state_manager.get_status_report()

    def get_facet_snapshots(self) -> list[FacetSnapshot]:
        return self.app_state_manager.get_facet_snapshots()

    # ------------------------------ Telemetry --------------------------------

    def get_app_usable(self) -> bool:
        """Usability as a telemetry signal."""
        return self.is_app_usable()

    def get_app_state_number(self) -> int:
        """
        Severity weight of the application state, for numeric timeseries.

        Use get_app_state() / is_app_*() for decisions in code.
        """
        return self.get_app_state().weight

    # ------------------------------ Facets -----------------------------------

    def create_registered_app_state_push_facet(self, name: str) -> AppStatePushFacet | None:
        return self.app_state_manager.create_registered_app_state_push_facet(name)

    def register_app_state_facet(self, name: str, facet: AppStateFacet) -> bool:
        return self.app_state_manager.register_app_state_facet(name, facet)

    # ---------------------------- Lifecycle ----------------------------------

    def start_periodic_tasks(self) -> None:
        """Start periodic state synchronization. No-op if already running."""
        self.periodic_tasks_runner.start()

    def stop_periodic_tasks(self, wait: bool = False) -> None:
        """Stop periodic state synchronization. No-op if not running."""
        self.periodic_tasks_runner.stop(wait=wait)
