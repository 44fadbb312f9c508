#!/usr/bin/env python3
"""
Main CLI entry point with argument parser and command dispatch.
"""

from __future__ import annotations

import argparse

from statekeeper.interfaces.cli.commands.state_cli import cmd_drain, cmd_ha_state, cmd_override, cmd_status
from statekeeper.services.config_svc import ConfigService


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    p = argparse.ArgumentParser(
        prog="statekeeper",
        description="Statekeeper - inspect and steer application/HA state files",
        epilog="Examples:\n"
        "  statekeeper status --max-age 10            # Fail if heartbeat older than 10s\n"
        "  statekeeper drain on                       # Take instance out of traffic\n"
        "  statekeeper override WARNING               # Force WARNING regardless of facets\n"
        "  statekeeper override --clear               # Back to normal state computation\n"
        "  statekeeper ha-state BACKUP                # Write HA role as a fencer would",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument(
        "--state-dir",
        default=None,
        help="state directory (default: configured state_dir)",
    )

    sub = p.add_subparsers(
        dest="cmd",
        title="commands",
        description="Available commands (use 'statekeeper <command> --help' for command-specific help)",
    )

    # status: Show persisted state
    s = sub.add_parser("status", help="Show persisted application state and heartbeat")
    s.add_argument("--max-age", type=float, default=None, help="treat heartbeats older than N seconds as stale")
    s.set_defaults(func=cmd_status)

    # drain: Toggle drain marker
    s = sub.add_parser("drain", help="Start or end draining (forces FAULTY)")
    s.add_argument("mode", choices=["on", "off"], help="on: create drain file, off: remove it")
    s.set_defaults(func=cmd_drain)

    # override: Force or clear state
    s = sub.add_parser("override", help="Force an application state, or clear the override")
    s.add_argument("state", nargs="?", help="INITIALIZING, READY, WARNING or FAULTY")
    s.add_argument("--clear", action="store_true", help="remove the override")
    s.set_defaults(func=cmd_override)

    # ha-state: Write HA role
    s = sub.add_parser("ha-state", help="Write the HA role file (MASTER, BACKUP, FAULT)")
    s.add_argument("role", help="MASTER, BACKUP or FAULT")
    s.set_defaults(func=cmd_ha_state)

    return p


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # If no command provided, show help
    if args.cmd is None:
        parser.print_help()
        return 0

    if args.state_dir is None:
        args.state_dir = ConfigService().make_state_config().state_dir

    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
