"""
Services package.
"""

from .config_svc import ConfigService, StateConfig
from .infrastructure import (
    AppStateManager,
    HaStateManager,
    PeriodicTasksRunner,
    StateManager,
)

__all__ = [
    "AppStateManager",
    "ConfigService",
    "HaStateManager",
    "PeriodicTasksRunner",
    "StateConfig",
    "StateManager",
]
