"""
HA state service.

Tracks the role an external HA fencer assigned to this instance. The fencer
writes the role name (MASTER, BACKUP or FAULT) as first line of the
"ha-state" file in the state directory.

Static mode (HA disabled) always reports MASTER and never touches disk on
periodic reads. Dynamic mode starts at FAULT and re-reads the file every
cycle; anything unreadable or unparsable resolves to FAULT.

The role is read leniently: surrounding whitespace on the first line is
ignored, so " MASTER " counts as MASTER. Case still matters.
"""

from __future__ import annotations

import logging
from pathlib import Path

from statekeeper.helpers.dto.state_dto import HaState
from statekeeper.helpers.files import read_first_line

logger = logging.getLogger(__name__)

HA_STATE_FILE_NAME = "ha-state"


class HaStateManager:
    """Holds the last HA role read from the fencer's file."""

    def __init__(self, state_dir: Path | str, dynamic: bool = False) -> None:
        """
        Args:
            state_dir: Directory holding the ha-state file
            dynamic: Whether periodic reads consult the file at all
        """
        self.state_path = Path(state_dir) / HA_STATE_FILE_NAME
        self.dynamic = dynamic
        self._state = HaState.FAULT if dynamic else HaState.MASTER

    def get_ha_state(self) -> HaState:
        return self._state

    def is_ha_master(self) -> bool:
        return self._state is HaState.MASTER

    def is_ha_backup(self) -> bool:
        return self._state is HaState.BACKUP

    def is_ha_fault(self) -> bool:
        return self._state is HaState.FAULT

    def is_ha_healthy(self) -> bool:
        return self._state.healthy

    def is_ha_unhealthy(self) -> bool:
        return not self._state.healthy

    def set_ha_state(self, state: HaState | None) -> None:
        """Set the role directly. None is taken as FAULT."""
        self._state = HaState.FAULT if state is None else state

    def read_state(self) -> None:
        """Re-read the role file, but only in dynamic mode."""
        if self.dynamic:
            self.read_state_forced()

    def read_state_forced(self) -> None:
        """Re-read the role file regardless of mode."""
        new_state = HaState.FAULT
        try:
            first_line = read_first_line(self.state_path)
        except OSError as e:
            logger.debug("[HaState] Could not read %s: %s", self.state_path, e)
            first_line = None

        if first_line is not None:
            try:
                new_state = HaState.parse(first_line.strip())
            except ValueError:
                logger.warning(
                    "[HaState] First line '%s' of HA state file '%s' does not parse to a proper state",
                    first_line,
                    self.state_path,
                )

        if new_state is not self._state:
            logger.info("[HaState] HA state switch: '%s' -> '%s'", self._state, new_state)
        self._state = new_state
