"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)`; this only installs the
root handler once at startup.
"""

from __future__ import annotations

import logging

from . import config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False


def _parse_level(value: str) -> int:
    level = getattr(logging, value.strip().upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(*, force: bool = False) -> None:
    global _configured
    if _configured and not force:
        return None

    logging.basicConfig(
        level=_parse_level(config.env_str("LOG_LEVEL", "INFO")),
        format=LOG_FORMAT,
        force=force,
    )
    _configured = True
