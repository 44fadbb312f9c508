"""
Cross-layer DTOs (Data Transfer Objects).

Rules for DTO modules:
- Import only stdlib and typing (no statekeeper.* imports)
- Contain ONLY enum/dataclass/protocol definitions
- No I/O, no business logic
"""

from .state_dto import AnnotatedAppStateFacet, AppState, AppStateFacet, FacetSnapshot, HaState

__all__ = [
    "AnnotatedAppStateFacet",
    "AppState",
    "AppStateFacet",
    "FacetSnapshot",
    "HaState",
]
