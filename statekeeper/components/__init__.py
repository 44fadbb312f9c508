"""Components layer - state building blocks.

Components are leaf modules that:
- Do NOT import services or interfaces
- ARE imported and used BY services
- May import from: helpers, other components

Architecture:
- helpers/ = stdlib-only utilities (pure, stateless)
- components/ = facet building blocks (this layer)
- services/ = wiring, long-lived resources, background threads
- interfaces/ = HTTP/CLI presentation
"""
