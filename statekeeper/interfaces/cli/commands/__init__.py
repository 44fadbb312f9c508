"""
CLI commands package.
"""

from .state_cli import cmd_drain, cmd_ha_state, cmd_override, cmd_status

__all__ = [
    "cmd_drain",
    "cmd_ha_state",
    "cmd_override",
    "cmd_status",
]
