"""Version information for Statekeeper."""

# Semantic versioning: MAJOR.MINOR.PATCH
# MAJOR: Breaking changes to state files or the accessor surface
# MINOR: New features, backward compatible
# PATCH: Bug fixes, backward compatible

__version__ = "0.2.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Version history:
# 0.2.0 - Operator tooling
#         - statekeeper CLI (status, drain, override, ha-state)
#         - /status/json endpoint with per-facet details
#         - Runner stop(wait=True) for orderly shutdown
# 0.1.0 - Initial release
#         - Facet registry with severity combination and override/drain files
#         - Usable marker heartbeat and atomic status report
#         - Static and dynamic HA role reading
