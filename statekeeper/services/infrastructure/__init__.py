"""Infrastructure services - state plumbing."""

from .app_state_svc import (
    DRAIN_FACET_NAME,
    MAIN_FACET_NAME,
    OVERRIDE_FACET_NAME,
    STATE_FILE_NAME,
    AppStateManager,
    sanitize_facet_name,
)
from .ha_state_svc import HA_STATE_FILE_NAME, HaStateManager
from .periodic_tasks_svc import DEFAULT_PAUSE_S, PeriodicTasksRunner
from .state_manager_svc import StateManager

__all__ = [
    "DEFAULT_PAUSE_S",
    "DRAIN_FACET_NAME",
    "HA_STATE_FILE_NAME",
    "MAIN_FACET_NAME",
    "OVERRIDE_FACET_NAME",
    "STATE_FILE_NAME",
    "AppStateManager",
    "HaStateManager",
    "PeriodicTasksRunner",
    "StateManager",
    "sanitize_facet_name",
]
