"""
State commands: inspect and steer a running instance through its state files.

These commands never talk to the process. They read what it persisted and
write the drain/override files it picks up on its next cycle.
"""

from __future__ import annotations

import argparse
import time
from pathlib import Path

from rich.markup import escape

from statekeeper.helpers.dto.state_dto import AppState, HaState
from statekeeper.helpers.files import atomic_write_text, create_or_touch, delete_if_exists, read_first_line
from statekeeper.interfaces.cli.ui import STATE_COLORS, InfoPanel, print_error, print_info, print_success
from statekeeper.services.infrastructure.app_state_svc import STATE_FILE_NAME
from statekeeper.services.infrastructure.ha_state_svc import HA_STATE_FILE_NAME


def _state_path(args: argparse.Namespace, suffix: str = "") -> Path:
    return Path(args.state_dir) / f"{STATE_FILE_NAME}{suffix}"


def cmd_status(args: argparse.Namespace) -> int:
    """
    Show the persisted status report, heartbeat age and HA role.

    Exit code 0 if the usable marker exists (and is fresh, with --max-age), 1 otherwise.
    """
    state_path = _state_path(args)
    usable_path = _state_path(args, ".usable")
    ha_path = Path(args.state_dir) / HA_STATE_FILE_NAME

    try:
        report = state_path.read_text(encoding="utf-8")
    except OSError as e:
        print_error(f"Cannot read {escape(str(state_path))}: {escape(str(e))}")
        return 1

    first_line = report.splitlines()[0] if report else ""
    InfoPanel.show("Application State", escape(report.rstrip("\n")), STATE_COLORS.get(first_line, "red"))

    try:
        ha_role = read_first_line(ha_path) or ""
    except OSError:
        ha_role = ""
    print_info(f"HA state file: {escape(ha_role.strip()) or 'absent'}")

    try:
        age_s = time.time() - usable_path.stat().st_mtime
    except FileNotFoundError:
        print_error("Usable marker absent: instance reports itself unusable")
        return 1
    except OSError as e:
        print_error(f"Cannot stat {escape(str(usable_path))}: {escape(str(e))}")
        return 1

    if args.max_age is not None and age_s > args.max_age:
        print_error(f"Usable marker is stale: last heartbeat {age_s:.1f}s ago (max {args.max_age}s)")
        return 1

    print_success(f"Usable marker present: last heartbeat {age_s:.1f}s ago")
    return 0


def cmd_drain(args: argparse.Namespace) -> int:
    """Create or remove the drain marker."""
    drain_path = _state_path(args, ".drain")
    try:
        if args.mode == "on":
            create_or_touch(drain_path, time.time_ns())
            print_success(f"Draining: created {escape(str(drain_path))}")
        elif delete_if_exists(drain_path):
            print_success(f"Drain ended: removed {escape(str(drain_path))}")
        else:
            print_info("Not draining: no drain file present")
    except OSError as e:
        print_error(f"Cannot update {escape(str(drain_path))}: {escape(str(e))}")
        return 1
    return 0


def cmd_override(args: argparse.Namespace) -> int:
    """Force a state onto the instance, or clear a forced state."""
    override_path = _state_path(args, ".override")

    if args.clear:
        try:
            delete_if_exists(override_path)
        except OSError as e:
            print_error(f"Cannot remove {escape(str(override_path))}: {escape(str(e))}")
            return 1
        print_success("Override cleared")
        return 0

    if args.state is None:
        print_error("Give a state to force, or --clear")
        return 2

    try:
        state = AppState.parse(args.state.strip().upper())
    except ValueError:
        print_error(f"Unknown state '{escape(args.state)}'. Use one of: {', '.join(s.name for s in AppState)}")
        return 2

    try:
        atomic_write_text(override_path, f"{state}\n")
    except OSError as e:
        print_error(f"Cannot write {escape(str(override_path))}: {escape(str(e))}")
        return 1
    print_success(f"Override to {state} written to {escape(str(override_path))}")
    return 0


def cmd_ha_state(args: argparse.Namespace) -> int:
    """Write the HA role file the way an HA fencer does."""
    ha_path = Path(args.state_dir) / HA_STATE_FILE_NAME
    try:
        role = HaState.parse(args.role.strip().upper())
    except ValueError:
        print_error(f"Unknown HA state '{escape(args.role)}'. Use one of: {', '.join(s.name for s in HaState)}")
        return 2

    try:
        atomic_write_text(ha_path, f"{role}\n")
    except OSError as e:
        print_error(f"Cannot write {escape(str(ha_path))}: {escape(str(e))}")
        return 1
    print_success(f"HA state {role} written to {escape(str(ha_path))}")
    return 0
