"""
Application state service.

## Application State Contract

AppStateManager OWNS:
- Facet registry (name -> facet), first registration wins
- Built-in facets: "main", "draining" and the override facet ("state-override")
- Aggregate state computation and transition logging
- The state files under the state directory

AppStateManager does NOT own:
- Any thread. Periodic reads/writes are driven by PeriodicTasksRunner.

### Files

| File                 | Direction | Meaning                                           |
|----------------------|-----------|---------------------------------------------------|
| app-state            | write     | Human-readable status report (tmp + rename)       |
| app-state.usable     | write     | Exists while usable; mtime is the heartbeat       |
| app-state.drain      | read      | Existence forces FAULTY via the "draining" facet  |
| app-state.override   | read      | First line forces that state; empty file clears   |

### Key Rules

1. The aggregate is the heaviest state across all facets, starting from READY.
   A facet that raises while polled counts as FAULTY for that poll.

2. An active override replaces the aggregate entirely.

3. Override file content that does not name a state forces FAULTY. An empty
   override file, or one that vanishes mid-read, clears the override.

4. Failing to delete the usable marker logs at error level: a stale marker
   makes an unhealthy instance look healthy to HA fencers.
"""

from __future__ import annotations

import logging
import re
import threading
from pathlib import Path

from statekeeper.components.state.facets_comp import AppStatePushFacet, OverridingAppStatePushFacet
from statekeeper.helpers.dto.state_dto import AnnotatedAppStateFacet, AppState, AppStateFacet, FacetSnapshot
from statekeeper.helpers.exceptions import StateManagerError
from statekeeper.helpers.files import atomic_write_text, create_or_touch, delete_if_exists, read_first_line
from statekeeper.helpers.time_helper import Clock

logger = logging.getLogger(__name__)

STATE_FILE_NAME = "app-state"

MAIN_FACET_NAME = "main"
DRAIN_FACET_NAME = "draining"
OVERRIDE_FACET_NAME = "state-override"

_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9]")


def sanitize_facet_name(name: str) -> str:
    """Replace every character outside [a-zA-Z0-9] with "-"."""
    return _UNSAFE_NAME_CHARS.sub("-", name)


def _log_transition(message: str, old: AppState, new: AppState) -> None:
    if old.usable and not new.usable:
        logger.error(message)
    else:
        logger.info(message)


class _FacetCapsule:
    """A registered facet plus the state it reported last time it was polled."""

    def __init__(self, name: str, facet: AppStateFacet) -> None:
        self.name = name
        self.facet = facet
        self._lock = threading.Lock()
        try:
            self._previous_state = self.read()
        except Exception:
            self._previous_state = AppState.FAULTY

    def read(self) -> AppState:
        """Poll the facet without tracking. None is read as FAULTY."""
        state = self.facet.get_app_state()
        if state is None:
            return AppState.FAULTY
        return state

    def poll(self) -> AppState:
        """Poll the facet, logging state changes. Never raises."""
        try:
            state = self.read()
        except Exception as e:
            logger.debug("[AppState] Facet '%s' raised while polled: %s", self.name, e)
            state = AppState.FAULTY

        with self._lock:
            previous = self._previous_state
            self._previous_state = state

        if previous is not state:
            _log_transition(
                f"[AppState] Facet '{self.name}' changed state from '{previous}' to '{state}'",
                previous,
                state,
            )
        return state


class AppStateManager:
    """
    Aggregates facet states into one application state and persists it.

    Callers poll get_app_state() from any thread. PeriodicTasksRunner calls
    read_state_paths() and persist_state() on its own thread.
    """

    def __init__(self, state_dir: Path | str, clock: Clock | None = None) -> None:
        """
        Initialize the manager and register the built-in facets.

        Args:
            state_dir: Directory holding all state files
            clock: Clock for report timestamps and heartbeat mtimes

        Raises:
            StateManagerError: If a built-in facet cannot be registered
        """
        self.state_dir = Path(state_dir)
        self.clock = clock or Clock()

        self.state_path = self.state_dir / STATE_FILE_NAME
        self.state_tmp_path = self.state_dir / f"{STATE_FILE_NAME}.tmp"
        self.state_usable_path = self.state_dir / f"{STATE_FILE_NAME}.usable"
        self.state_drain_path = self.state_dir / f"{STATE_FILE_NAME}.drain"
        self.state_override_path = self.state_dir / f"{STATE_FILE_NAME}.override"

        # Registry: sanitized name -> capsule. Insertion order is report order.
        self._facets: dict[str, _FacetCapsule] = {}
        self._facets_lock = threading.Lock()

        self._previous_state = AppState.INITIALIZING
        self._previous_state_lock = threading.Lock()

        main_facet = self.create_registered_app_state_push_facet(MAIN_FACET_NAME)
        if main_facet is None:
            raise StateManagerError(f"Failed to register main facet with {self!r}")
        self.main_facet = main_facet

        drain_facet = self.create_registered_app_state_push_facet(DRAIN_FACET_NAME)
        if drain_facet is None:
            raise StateManagerError(f"Failed to register draining facet with {self!r}")
        self.drain_facet = drain_facet

        self.override_facet = OverridingAppStatePushFacet(self.state_override_path)
        if not self.register_app_state_facet(OVERRIDE_FACET_NAME, self.override_facet):
            raise StateManagerError(f"Failed to register override facet with {self!r}")

    def __repr__(self) -> str:
        return f"AppStateManager(state_dir={str(self.state_dir)!r})"

    # ----------------------------- Registration ------------------------------

    def register_app_state_facet(self, name: str, facet: AppStateFacet) -> bool:
        """
        Register a facet so it contributes to the application state.

        Registering the same facet under the same name again is a no-op success.

        Args:
            name: Registration name; characters outside [a-zA-Z0-9] become "-"
            facet: The facet to register

        Returns:
            True if facet is registered under name, False if name is taken
            by a different facet
        """
        safe_name = sanitize_facet_name(name)
        capsule = _FacetCapsule(safe_name, facet)
        with self._facets_lock:
            existing = self._facets.setdefault(safe_name, capsule)
        registered = existing is capsule or existing.facet is facet

        if not registered:
            logger.error(
                "[AppState] Could not register %r for name '%s' as that is taken by %r already",
                facet,
                safe_name,
                existing.facet,
            )
        return registered

    def create_registered_app_state_push_facet(self, name: str) -> AppStatePushFacet | None:
        """
        Create a push facet (initially INITIALIZING) and register it.

        Returns:
            The registered facet, or None if name is already taken
        """
        facet = AppStatePushFacet()
        if not self.register_app_state_facet(name, facet):
            return None
        return facet

    def get_facet_names(self) -> list[str]:
        """Get registered facet names in registration order."""
        with self._facets_lock:
            return list(self._facets.keys())

    def _capsules(self) -> list[_FacetCapsule]:
        with self._facets_lock:
            return list(self._facets.values())

    # ------------------------------ State API --------------------------------

    def get_app_state(self) -> AppState:
        """Compute the current application state. Never raises."""
        capsules = self._capsules()
        if not capsules:
            logger.error("[AppState] No facets registered")
            state = AppState.FAULTY
        elif self.override_facet.is_override():
            state = self.override_facet.get_app_state()
        else:
            state = AppState.READY
            for capsule in capsules:
                state = state.combine(capsule.poll())

        with self._previous_state_lock:
            previous = self._previous_state
            self._previous_state = state

        if previous is not state:
            _log_transition(
                f"[AppState] Application state changed from '{previous}' to '{state}'",
                previous,
                state,
            )
        return state

    def set_main_app_state(self, state: AppState | None) -> None:
        """Set the "main" facet. None is taken as FAULTY."""
        self.main_facet.set_app_state(state)

    def is_app_initializing(self) -> bool:
        return self.get_app_state() is AppState.INITIALIZING

    def is_app_ready(self) -> bool:
        return self.get_app_state() is AppState.READY

    def is_app_warning(self) -> bool:
        return self.get_app_state() is AppState.WARNING

    def is_app_faulty(self) -> bool:
        return self.get_app_state() is AppState.FAULTY

    def is_app_usable(self) -> bool:
        return self.get_app_state().usable

    def is_app_unusable(self) -> bool:
        return not self.get_app_state().usable

    # ----------------------------- Input files -------------------------------

    def read_drain_state(self) -> None:
        """Feed the "draining" facet from the drain marker file."""
        if self.state_drain_path.exists():
            self.drain_facet.set_app_state(
                AppState.FAULTY,
                f"The draining file '{self.state_drain_path}' exists, hence draining by marking FAULTY",
            )
        else:
            self.drain_facet.set_app_state(AppState.READY)

    def read_override_state(self) -> None:
        """Activate or clear the override from the override file."""
        was_active = self.override_facet.is_override()
        self._read_override_file()
        is_active = self.override_facet.is_override()

        if is_active and not was_active:
            logger.warning(
                "[AppState] State override activated: %s (%s)",
                self.override_facet.get_app_state(),
                self.override_facet.get_app_state_annotation(),
            )
        elif was_active and not is_active:
            logger.info("[AppState] State override cleared")

    def _read_override_file(self) -> None:
        path = self.state_override_path
        if not path.exists():
            self.override_facet.reset_override()
            return

        try:
            first_line = read_first_line(path)
        except OSError:
            # Either the file went away between the existence check and the
            # read, or it is there but unreadable. Only the latter is a fault.
            if path.exists():
                self.override_facet.set_override(AppState.FAULTY, f"Override file {path} exists, but cannot be read")
            else:
                self.override_facet.reset_override()
            return

        if first_line is None:
            # Empty file: most likely a botched attempt to drop the override.
            self.override_facet.reset_override()
            return

        content = first_line.strip()
        try:
            state = AppState.parse(content)
        except ValueError:
            self.override_facet.set_override(
                AppState.FAULTY,
                f"State '{content}' (found in: {path}) does not exist",
            )
            return
        self.override_facet.set_override(state)

    def read_state_paths(self) -> None:
        """Refresh all file-fed facets."""
        self.read_drain_state()
        self.read_override_state()

    # ----------------------------- Persistence -------------------------------

    def persist_state(self) -> None:
        """Write the status report and maintain the usable marker."""
        # One poll per run; the report header and the marker must agree.
        state = self.get_app_state()
        self._persist_state_file(state)
        self._persist_usable_file(state)

    def _persist_state_file(self, state: AppState) -> None:
        try:
            atomic_write_text(self.state_path, self.get_status_report(state), self.state_tmp_path)
        except OSError as e:
            logger.warning("[AppState] Could not materialize state %s: %s", self.state_path, e)

    def _persist_usable_file(self, state: AppState) -> None:
        path = self.state_usable_path
        if state.usable:
            try:
                create_or_touch(path, self.clock.now_ns())
            except OSError as e:
                logger.warning("[AppState] Could not create or touch %s: %s", path, e)
            return

        try:
            if delete_if_exists(path):
                logger.info("[AppState] Removed usable marker %s", path)
        except OSError as e:
            logger.error("[AppState] Could not delete %s: %s", path, e)

    # ------------------------------ Reporting --------------------------------

    def get_facet_snapshots(self) -> list[FacetSnapshot]:
        """
        Read state and annotation of every facet, isolating failures per facet.

        A facet whose state read raises shows as FAULTY with the exception as
        annotation. A failing annotation read keeps the state and shows the
        exception instead of the annotation.
        """
        snapshots: list[FacetSnapshot] = []
        for capsule in self._capsules():
            facet = capsule.facet
            annotation: str | None = None
            try:
                state = capsule.read()
                if isinstance(facet, AnnotatedAppStateFacet):
                    try:
                        annotation = facet.get_app_state_annotation()
                    except Exception as e:
                        logger.warning("[AppState] Getting annotation for facet %s failed: %s", capsule.name, e)
                        annotation = f"Getting annotation threw {type(e).__name__}: {e}"
            except Exception as e:
                logger.warning("[AppState] Getting state for facet %s failed: %s", capsule.name, e)
                state = AppState.FAULTY
                annotation = f"Getting state threw {type(e).__name__}: {e}"
            snapshots.append(FacetSnapshot(name=capsule.name, state=state, annotation=annotation or ""))
        return snapshots

    def get_status_report(self, state: AppState | None = None) -> str:
        """
        Render the multi-line plain text status report.

        The first line is the bare state name, so probes can grep it.

        Args:
            state: Already computed application state; polled if None

        Returns:
            The report, newline terminated
        """
        if state is None:
            state = self.get_app_state()

        lines = [
            str(state),
            "",
            f"Application state: {state}",
            f"Application state report time: {self.clock.format_now()}",
            "",
            "Application state details:",
        ]
        for snapshot in self.get_facet_snapshots():
            lines.append(f"  {snapshot.state.name:<14} {snapshot.name:<14} {snapshot.annotation}".rstrip())
        return "\n".join(lines) + "\n"
