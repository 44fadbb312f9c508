"""
State components package.
"""

from .facets_comp import AppStatePushFacet, OverridingAppStatePushFacet

__all__ = [
    "AppStatePushFacet",
    "OverridingAppStatePushFacet",
]
