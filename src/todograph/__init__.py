"""
Todo GraphQL package.

A todo list with user assignments: GraphQL API (``todograph.api``), browser
pages (``todograph.routers.pages``) and pluggable persistence
(``todograph.store``). The ASGI app lives at ``todograph.main:app``.
"""

__version__ = "0.1.0"
