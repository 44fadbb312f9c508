"""State-related DTOs and types used across layers.

This module contains the severity scale, the HA role and the facet
capability protocols.

## Severity Scale

| AppState     | Usable | Weight | Meaning                                   |
|--------------|--------|--------|-------------------------------------------|
| READY        | yes    | 1      | Healthy, no issues                        |
| WARNING      | yes    | 2      | Still serving, but needs attention        |
| INITIALIZING | no     | 3      | Starting up, should not receive traffic   |
| FAULTY       | no     | 4      | Unhealthy, must not be used               |

Combining two states always yields the heavier one. FAULTY absorbs
everything, READY is neutral.

## HA Roles

| HaState | Meaning                                          |
|---------|--------------------------------------------------|
| MASTER  | Fencer considers this instance the active one    |
| BACKUP  | Fencer considers this instance a healthy standby |
| FAULT   | Fencer considers this instance broken / unknown  |
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable


class AppState(Enum):
    """Health level of the application or of a single facet."""

    INITIALIZING = (False, 3)
    READY = (True, 1)
    WARNING = (True, 2)
    FAULTY = (False, 4)

    def __init__(self, usable: bool, weight: int) -> None:
        self.usable = usable
        self.weight = weight

    def __str__(self) -> str:
        return self.name

    def combine(self, other: AppState | None) -> AppState:
        """Pick the worse of two states (ties keep self)."""
        if other is not None and other.weight > self.weight:
            return other
        return self

    @classmethod
    def parse(cls, name: str) -> AppState:
        """
        Resolve an exact member name like "WARNING".

        Raises:
            ValueError: If name is not a known state
        """
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown application state: {name!r}") from None


class HaState(Enum):
    """Failover role an external HA fencer assigned to this instance."""

    MASTER = 1
    BACKUP = 2
    FAULT = 3

    def __str__(self) -> str:
        return self.name

    @property
    def healthy(self) -> bool:
        return self is not HaState.FAULT

    @classmethod
    def parse(cls, name: str) -> HaState:
        """
        Resolve an exact member name like "BACKUP".

        Raises:
            ValueError: If name is not a known role
        """
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown HA state: {name!r}") from None


@runtime_checkable
class AppStateFacet(Protocol):
    """Anything that can report its own contribution to the application state.

    get_app_state() is called at least every few seconds, possibly from
    several threads at once. Implementations must return quickly, must not
    block and must be thread-safe.
    """

    def get_app_state(self) -> AppState: ...


@runtime_checkable
class AnnotatedAppStateFacet(AppStateFacet, Protocol):
    """A facet that can also explain its current state in free text."""

    def get_app_state_annotation(self) -> str | None: ...


@dataclass(frozen=True)
class FacetSnapshot:
    """Point-in-time view of one registered facet, as shown in status reports."""

    name: str
    state: AppState
    annotation: str = ""
