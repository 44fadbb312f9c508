"""
API types package.
"""

from .state_types import AppStatusResponse, FacetStatusResponse

__all__ = [
    "AppStatusResponse",
    "FacetStatusResponse",
]
