"""
Application composition root.

This module defines the Application class, which builds and owns the state
managers for one process:

- Application owns: config, AppStateManager, HaStateManager,
  PeriodicTasksRunner and the StateManager facade over them
- All configuration values are read once in __init__
- Hand application.state_manager to whatever needs it; there is no
  module-level instance

run_application() wraps a user application so its lifecycle drives the
"main" facet: READY while running, FAULTY once run() returns or fails.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from statekeeper.helpers.dto.state_dto import AppState
from statekeeper.helpers.time_helper import Clock
from statekeeper.services.config_svc import ConfigService
from statekeeper.services.infrastructure.app_state_svc import AppStateManager
from statekeeper.services.infrastructure.ha_state_svc import HaStateManager
from statekeeper.services.infrastructure.periodic_tasks_svc import PeriodicTasksRunner
from statekeeper.services.infrastructure.state_manager_svc import StateManager

logger = logging.getLogger(__name__)


class Application:
    """
    Composition root and lifecycle owner for the state managers.

    Example:
        application = Application()
        application.start()
        facet = application.state_manager.create_registered_app_state_push_facet("db")
        ...
        application.stop()
    """

    def __init__(self, config_service: ConfigService | None = None, clock: Clock | None = None) -> None:
        self.config_service = config_service or ConfigService()
        cfg = self.config_service.make_state_config()

        self.state_dir = Path(cfg.state_dir)
        self.ha_state_enabled = cfg.ha_state_enabled
        self.periodic_pause_s = cfg.periodic_pause_s
        self.api_host = cfg.api_host
        self.api_port = cfg.api_port

        self.app_state_manager = AppStateManager(self.state_dir, clock=clock)
        self.ha_state_manager = HaStateManager(self.state_dir, dynamic=self.ha_state_enabled)
        self.periodic_tasks_runner = PeriodicTasksRunner(
            self.app_state_manager,
            self.ha_state_manager,
            pause_s=self.periodic_pause_s,
        )
        self.state_manager = StateManager(
            self.app_state_manager,
            self.ha_state_manager,
            self.periodic_tasks_runner,
        )
        self._running = False

    def start(self) -> None:
        """Ensure the state directory exists and start periodic state tasks."""
        if self._running:
            return
        try:
            self.state_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("[Application] Could not create state directory %s: %s", self.state_dir, e)

        self.state_manager.start_periodic_tasks()
        self._running = True
        logger.info(
            "[Application] Started: state_dir=%s ha_state_enabled=%s pause=%.1fs",
            self.state_dir,
            self.ha_state_enabled,
            self.periodic_pause_s,
        )

    def stop(self) -> None:
        """Stop periodic state tasks, then persist the final state once."""
        if not self._running:
            return
        self.state_manager.stop_periodic_tasks(wait=True)
        # Without this, a FAULTY set during shutdown would leave the usable marker behind.
        self.app_state_manager.persist_state()
        self._running = False
        logger.info("[Application] Stopped")

    def is_running(self) -> bool:
        return self._running


class Runnable(Protocol):
    """The application whose lifecycle run_application() reports."""

    def init(self) -> None: ...

    def run(self) -> None: ...

    def shutdown(self) -> None: ...


def run_application(runnable: Runnable, state_manager: StateManager) -> None:
    """
    Run an application, reflecting its lifecycle in the "main" facet.

    init() → main READY → run() → main FAULTY → shutdown(). If init() or run()
    raise, main is set FAULTY before the exception propagates; shutdown() still
    runs after a failing run().
    """
    try:
        runnable.init()
    except Exception:
        state_manager.set_main_app_state(AppState.FAULTY)
        raise

    state_manager.set_main_app_state(AppState.READY)
    try:
        runnable.run()
    finally:
        state_manager.set_main_app_state(AppState.FAULTY)
        runnable.shutdown()
