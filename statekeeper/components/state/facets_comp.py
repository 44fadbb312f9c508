"""Facet implementations that callers push state into."""

from __future__ import annotations

from pathlib import Path

from statekeeper.helpers.dto.state_dto import AppState


class AppStatePushFacet:
    """
    Facet whose state is set explicitly by its owner.

    Starts as INITIALIZING without annotation. Reads and writes are lock-free;
    see set_app_state() for the ordering guarantee.
    """

    def __init__(self) -> None:
        self._annotation: str | None = None
        self._state: AppState = AppState.INITIALIZING

    def get_app_state(self) -> AppState:
        return self._state

    def get_app_state_annotation(self) -> str | None:
        return self._annotation

    def set_app_state(self, state: AppState | None, annotation: str | None = None) -> None:
        """
        Set state and annotation. The annotation is reset if not given.

        Args:
            state: New state. None is taken as FAULTY; pass FAULTY explicitly instead.
            annotation: Free-text explanation of the state
        """
        if state is None:
            state = AppState.FAULTY
        # Annotation first: a concurrent reader may pair the old state with the
        # new annotation, but never the new state with a stale annotation.
        self._annotation = annotation
        self._state = state

    def __repr__(self) -> str:
        return f"{type(self).__name__}(state={self._state}, annotation={self._annotation!r})"


class OverridingAppStatePushFacet(AppStatePushFacet):
    """
    Push facet that, while active, replaces the combination of all other facets.

    Starts inactive with state READY.
    """

    def __init__(self, override_path: Path) -> None:
        super().__init__()
        self.override_path = override_path
        self._active = False
        self.reset_override()

    def is_override(self) -> bool:
        return self._active

    def set_override(self, state: AppState, annotation: str | None = None) -> None:
        """Force state onto the application until reset_override() is called."""
        if annotation is None:
            annotation = f"State override in place. See file {self.override_path}"
        self.set_app_state(state, annotation)
        self._active = True

    def reset_override(self) -> None:
        """Drop any override; the facet then contributes a neutral READY."""
        self.set_app_state(
            AppState.READY,
            f"No overriding. Write state into {self.override_path} to override.",
        )
        self._active = False
