"""
Statekeeper - application health aggregation and HA state coordination.
"""

from .__version__ import __version__

__all__ = ["__version__"]
