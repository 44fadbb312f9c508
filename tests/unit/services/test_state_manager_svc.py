"""Unit tests for statekeeper.services.infrastructure.state_manager_svc."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from statekeeper.helpers.dto.state_dto import AppState, HaState
from statekeeper.services.infrastructure.state_manager_svc import StateManager


@pytest.fixture
def mocked_state_manager() -> StateManager:
    return StateManager(MagicMock(), MagicMock(), MagicMock())


class TestDelegation:
    """StateManager forwards to the underlying managers."""

    @pytest.mark.unit
    def test_set_main_app_state(self, mocked_state_manager: StateManager) -> None:
        mocked_state_manager.set_main_app_state(AppState.WARNING)
        mocked_state_manager.app_state_manager.set_main_app_state.assert_called_once_with(AppState.WARNING)

    @pytest.mark.unit
    def test_ha_state(self, mocked_state_manager: StateManager) -> None:
        mocked_state_manager.ha_state_manager.get_ha_state.return_value = HaState.BACKUP
        assert mocked_state_manager.get_ha_state() is HaState.BACKUP

    @pytest.mark.unit
    def test_register_facet(self, mocked_state_manager: StateManager) -> None:
        facet = MagicMock()
        mocked_state_manager.app_state_manager.register_app_state_facet.return_value = True
        assert mocked_state_manager.register_app_state_facet("db", facet) is True
        mocked_state_manager.app_state_manager.register_app_state_facet.assert_called_once_with("db", facet)

    @pytest.mark.unit
    def test_lifecycle(self, mocked_state_manager: StateManager) -> None:
        mocked_state_manager.start_periodic_tasks()
        mocked_state_manager.stop_periodic_tasks(wait=True)
        mocked_state_manager.periodic_tasks_runner.start.assert_called_once_with()
        mocked_state_manager.periodic_tasks_runner.stop.assert_called_once_with(wait=True)


class TestWithRealManagers:
    """StateManager over real managers on a temp state directory."""

    @pytest.mark.unit
    def test_app_predicates(self, state_manager: StateManager) -> None:
        state_manager.set_main_app_state(AppState.READY)
        assert state_manager.get_app_state() is AppState.READY
        assert state_manager.is_app_ready()
        assert state_manager.is_app_usable()
        assert not state_manager.is_app_unusable()
        assert not state_manager.is_app_initializing()

    @pytest.mark.unit
    def test_facets_combine(self, state_manager: StateManager) -> None:
        state_manager.set_main_app_state(AppState.READY)
        cache = state_manager.create_registered_app_state_push_facet("cache")
        assert cache is not None
        assert state_manager.is_app_initializing()

        cache.set_app_state(AppState.WARNING, "cold")
        assert state_manager.is_app_warning()
        assert any(s.name == "cache" and s.annotation == "cold" for s in state_manager.get_facet_snapshots())

    @pytest.mark.unit
    def test_ha_predicates(self, state_manager: StateManager) -> None:
        assert state_manager.is_ha_fault()
        assert state_manager.is_ha_unhealthy()
        state_manager.ha_state_manager.set_ha_state(HaState.MASTER)
        assert state_manager.is_ha_master()
        assert state_manager.is_ha_healthy()
        assert not state_manager.is_ha_backup()

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("state", "number", "usable"),
        [
            (AppState.READY, 1, True),
            (AppState.WARNING, 2, True),
            (AppState.INITIALIZING, 3, False),
            (AppState.FAULTY, 4, False),
        ],
    )
    def test_telemetry(self, state_manager: StateManager, state: AppState, number: int, usable: bool) -> None:
        state_manager.set_main_app_state(state)
        assert state_manager.get_app_state_number() == number
        assert state_manager.get_app_usable() is usable

    @pytest.mark.unit
    def test_status_report(self, state_manager: StateManager) -> None:
        state_manager.set_main_app_state(AppState.FAULTY)
        assert state_manager.get_status_report().startswith("FAULTY\n\nApplication state: FAULTY\n")
