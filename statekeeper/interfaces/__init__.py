"""
Statekeeper - Interfaces Package
================================

Contains all user-facing interfaces (presentation layer).

Structure:
- api/: FastAPI HTTP interface (status report for probes and operators)
- cli/: Command-line operator tooling with Rich UI
"""
