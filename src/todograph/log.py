"""Logging setup for the app.

Entry points call configure_logging() once; modules log through
``logging.getLogger(__name__)``.

Levels:
- DEBUG: store statements and GraphQL documents
- INFO: mutations applied by the repositories
- WARNING: configuration fallbacks
- ERROR: failed operations caught by the pages
"""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO", *, force: bool = False) -> None:
    """Attach a stream handler to the ``todograph`` logger at ``level``."""
    global _configured
    logger = logging.getLogger("todograph")
    logger.setLevel(_resolve_level(level))
    if _configured and not force:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    _configured = True


def _resolve_level(level: Optional[str]) -> int:
    value = logging.getLevelName((level or "INFO").upper())
    return value if isinstance(value, int) else logging.INFO
