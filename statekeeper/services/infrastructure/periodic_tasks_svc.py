"""
Periodic state tasks service.

One background thread runs the state cycle:

1. Refresh drain/override facets from disk
2. Persist the application state (report + usable marker)
3. Refresh the HA role from disk
4. Wait for the configured pause

Each start() hands its thread a fresh stop event. stop() sets that event and
forgets it, so the loop exits after the cycle in flight and a later start()
spawns a new thread without interfering with the old one.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from statekeeper.services.infrastructure.app_state_svc import AppStateManager
    from statekeeper.services.infrastructure.ha_state_svc import HaStateManager

logger = logging.getLogger(__name__)

DEFAULT_PAUSE_S = 2.0
DEFAULT_STOP_TIMEOUT_S = 5.0


class PeriodicTasksRunner:
    """Drives file reads/writes of the state managers on a fixed cadence."""

    def __init__(
        self,
        app_state_manager: AppStateManager,
        ha_state_manager: HaStateManager,
        pause_s: float = DEFAULT_PAUSE_S,
    ) -> None:
        self.app_state_manager = app_state_manager
        self.ha_state_manager = ha_state_manager
        self.pause_s = pause_s

        self._lock = threading.Lock()
        self._stop_event: threading.Event | None = None
        self._thread: threading.Thread | None = None

    # ---------------------------- Lifecycle ----------------------------------

    def start(self) -> None:
        """
        Start the background thread.

        Calling this while a thread is running is a silent no-op. After stop(),
        a fresh thread is started.
        """
        with self._lock:
            if self._stop_event is not None:
                return
            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(stop_event,),
                daemon=True,
                name="StatePeriodicTasks",
            )
            self._stop_event = stop_event
            self._thread = thread
            thread.start()

        logger.info("[PeriodicTasks] Started (pause %.1fs)", self.pause_s)

    def stop(self, wait: bool = False, timeout: float = DEFAULT_STOP_TIMEOUT_S) -> None:
        """
        Ask the background thread to exit. Safe to call repeatedly.

        The cycle in flight (if any) completes its disk operations first.

        Args:
            wait: Block until the thread has exited (bounded by timeout)
            timeout: Max seconds to wait when wait is True
        """
        with self._lock:
            stop_event = self._stop_event
            thread = self._thread
            self._stop_event = None
            self._thread = None

        if stop_event is None:
            return

        stop_event.set()
        if wait and thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning("[PeriodicTasks] Thread did not stop within %.1fs", timeout)

        logger.info("[PeriodicTasks] Stopped")

    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive()

    # ------------------------------ Loop -------------------------------------

    def run_once(self) -> None:
        """Run a single cycle on the calling thread."""
        self.app_state_manager.read_state_paths()
        self.app_state_manager.persist_state()
        self.ha_state_manager.read_state()

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            try:
                self.run_once()
            except Exception:
                logger.exception("[PeriodicTasks] State cycle failed")

            if stop_event.wait(self.pause_s):
                break
