"""
Pytest fixtures and configuration for the test suite.

Strategy:
- Real state managers on a per-test tmp_path state directory
- A frozen clock so report timestamps and heartbeat mtimes are deterministic
- Mocks only for collaborators whose calls are the thing under test
"""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Add project root to path so tests can import statekeeper package
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from statekeeper.helpers.time_helper import FixedClock  # noqa: E402
from statekeeper.services.infrastructure.app_state_svc import AppStateManager  # noqa: E402
from statekeeper.services.infrastructure.ha_state_svc import HaStateManager  # noqa: E402
from statekeeper.services.infrastructure.periodic_tasks_svc import PeriodicTasksRunner  # noqa: E402
from statekeeper.services.infrastructure.state_manager_svc import StateManager  # noqa: E402

# 2023-11-14T22:13:20.123456789 UTC
FIXED_EPOCH_NS = 1_700_000_000_123_456_789


# === STATE FIXTURES ===


@pytest.fixture
def state_dir(tmp_path: Path) -> Path:
    """Empty state directory."""
    path = tmp_path / "state"
    path.mkdir()
    return path


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Clock frozen at FIXED_EPOCH_NS."""
    return FixedClock(FIXED_EPOCH_NS)


@pytest.fixture
def app_state_manager(state_dir: Path, fixed_clock: FixedClock) -> AppStateManager:
    """AppStateManager with state paths read once, like after the first periodic cycle."""
    manager = AppStateManager(state_dir, clock=fixed_clock)
    manager.read_state_paths()
    return manager


@pytest.fixture
def ha_state_manager(state_dir: Path) -> HaStateManager:
    """Dynamic HaStateManager on the test state directory."""
    return HaStateManager(state_dir, dynamic=True)


@pytest.fixture
def state_manager(
    app_state_manager: AppStateManager,
    ha_state_manager: HaStateManager,
) -> Generator[StateManager, None, None]:
    """StateManager wired to real managers; periodic tasks are stopped afterwards."""
    runner = PeriodicTasksRunner(app_state_manager, ha_state_manager, pause_s=0.01)
    manager = StateManager(app_state_manager, ha_state_manager, runner)
    yield manager
    runner.stop(wait=True)


# === PYTEST MARKERS ===


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as fast unit test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test (threads + files)")
