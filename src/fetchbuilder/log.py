# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Logging helpers for fetchbuilder.

Every module logs through ``logging.getLogger(__name__)`` and never configures
handlers itself. Nothing is logged above DEBUG:

- ``fetchbuilder.builder``: failures captured into ``(response, error)`` pairs,
  with the URL and exception type.
- ``fetchbuilder.http.httpx_client``: aborted requests and init fields that
  have no httpx equivalent.

Since captured errors are returned rather than raised, these records are the
only trace of them outside the caller. ``setup_logging("debug")`` makes them
visible; ``FETCHBUILDER_LOG_LEVEL`` sets the level when none is passed.
"""

from __future__ import annotations

import logging
import os

PACKAGE_LOGGER = "fetchbuilder"

DEFAULT_LOG_LEVEL = os.getenv("FETCHBUILDER_LOG_LEVEL", "WARNING").upper()


def _level(name: str | None, fallback: int) -> int:
    if not name:
        return fallback
    value = getattr(logging, name.upper(), None)
    return value if isinstance(value, int) else fallback


def setup_logging(level: str | None = None, *, httpx_level: str | None = None) -> logging.Logger:
    """
    Configure logging for applications embedding the builder.

    ``level`` applies to the ``fetchbuilder`` logger tree. httpx logs one INFO
    record per request; ``httpx_level`` sets its logger separately and defaults
    to WARNING so debugging the builder does not also dump every exchange.
    """
    effective = _level(level or DEFAULT_LOG_LEVEL, logging.WARNING)
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(effective)
    logging.getLogger("httpx").setLevel(_level(httpx_level, logging.WARNING))
    return logger


__all__ = ["DEFAULT_LOG_LEVEL", "PACKAGE_LOGGER", "setup_logging"]
