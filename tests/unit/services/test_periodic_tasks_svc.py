"""
Unit tests for statekeeper.services.infrastructure.periodic_tasks_svc.

Threaded tests use short pauses and bounded waits; nothing sleeps for a
fixed time expecting the thread to have done something.
"""

from __future__ import annotations

import threading
import time
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from statekeeper.helpers.dto.state_dto import AppState
from statekeeper.services.infrastructure.app_state_svc import AppStateManager
from statekeeper.services.infrastructure.ha_state_svc import HaStateManager
from statekeeper.services.infrastructure.periodic_tasks_svc import PeriodicTasksRunner


def _wait_for(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def runner(app_state_manager: AppStateManager, ha_state_manager: HaStateManager):
    runner = PeriodicTasksRunner(app_state_manager, ha_state_manager, pause_s=0.01)
    yield runner
    runner.stop(wait=True)


class TestRunOnce:
    """Tests for a single cycle."""

    @pytest.mark.unit
    def test_cycle_order(self) -> None:
        calls = MagicMock()
        runner = PeriodicTasksRunner(calls.app, calls.ha)

        runner.run_once()

        assert [c[0] for c in calls.mock_calls] == ["app.read_state_paths", "app.persist_state", "ha.read_state"]

    @pytest.mark.unit
    def test_cycle_picks_up_files(self, runner: PeriodicTasksRunner, app_state_manager: AppStateManager) -> None:
        app_state_manager.set_main_app_state(AppState.READY)
        app_state_manager.state_drain_path.touch()
        ha_path = app_state_manager.state_dir / "ha-state"
        ha_path.write_text("BACKUP\n", encoding="utf-8")

        runner.run_once()

        assert app_state_manager.state_path.read_text(encoding="utf-8").startswith("FAULTY\n")
        assert not app_state_manager.state_usable_path.exists()
        assert runner.ha_state_manager.is_ha_backup()


@pytest.mark.integration
class TestLifecycle:
    """Tests for start()/stop() of the background thread."""

    def test_thread_writes_state_files(self, runner: PeriodicTasksRunner, app_state_manager: AppStateManager) -> None:
        app_state_manager.set_main_app_state(AppState.READY)
        runner.start()

        assert runner.is_running()
        assert _wait_for(app_state_manager.state_usable_path.exists)
        assert app_state_manager.state_path.read_text(encoding="utf-8").startswith("READY\n")

    def test_start_twice_keeps_one_thread(self, runner: PeriodicTasksRunner) -> None:
        runner.start()
        thread = runner._thread
        runner.start()
        assert runner._thread is thread
        assert [t.name for t in threading.enumerate()].count("StatePeriodicTasks") >= 1

    def test_stop_is_idempotent(self, runner: PeriodicTasksRunner) -> None:
        runner.stop()
        runner.start()
        runner.stop(wait=True)
        runner.stop(wait=True)
        assert not runner.is_running()

    def test_restart_spawns_new_thread(self, runner: PeriodicTasksRunner) -> None:
        runner.start()
        first = runner._thread
        runner.stop(wait=True)
        assert first is not None and not first.is_alive()

        runner.start()
        second = runner._thread
        assert second is not None and second is not first
        assert runner.is_running()

    def test_failing_cycle_does_not_kill_loop(self, state_dir: Path) -> None:
        app = MagicMock()
        cycles = threading.Semaphore(0)

        def read_state_paths() -> None:
            cycles.release()
            raise OSError("disk on fire")

        app.read_state_paths.side_effect = read_state_paths
        runner = PeriodicTasksRunner(app, MagicMock(), pause_s=0.01)
        runner.start()
        try:
            assert cycles.acquire(timeout=5)
            assert cycles.acquire(timeout=5)
            assert runner.is_running()
        finally:
            runner.stop(wait=True)

    def test_stop_interrupts_pause(self, app_state_manager: AppStateManager, ha_state_manager: HaStateManager) -> None:
        runner = PeriodicTasksRunner(app_state_manager, ha_state_manager, pause_s=60.0)
        runner.start()
        assert _wait_for(lambda: app_state_manager.state_path.exists())

        started = time.monotonic()
        runner.stop(wait=True)

        assert time.monotonic() - started < 5.0
        assert not runner.is_running()
