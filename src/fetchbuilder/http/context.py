# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Ambient fetch context.

A ContextVar-backed FetchContext lets callers swap the fetch collaborator (or
its settings) for a block of code without threading it through every builder.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Any

from ..config import HttpSettings, load_http_settings
from .client import Fetch


@dataclass(frozen=True)
class FetchContext:
    fetch: Fetch | None = None
    settings: HttpSettings | None = None


_current_fetch_context: ContextVar[FetchContext | None] = ContextVar("fetchbuilder_fetch_context", default=None)


def get_fetch_context() -> FetchContext:
    """Return the current ambient fetch context."""
    return _current_fetch_context.get() or FetchContext()


def get_http_settings() -> HttpSettings:
    """Return HttpSettings from context, falling back to loading defaults."""
    context = get_fetch_context()
    if context.settings is not None:
        return context.settings
    return load_http_settings()


@contextmanager
def fetch_context(**overrides: Any) -> Iterator[FetchContext]:
    """
    Context manager that layers overrides onto the ambient FetchContext.

    None-valued overrides are ignored to preserve outer context values.
    """
    current = get_fetch_context()
    filtered = {key: value for key, value in overrides.items() if value is not None}
    new_context = replace(current, **filtered) if filtered else current
    token = _current_fetch_context.set(new_context)
    try:
        yield new_context
    finally:
        _current_fetch_context.reset(token)


__all__ = ["FetchContext", "fetch_context", "get_fetch_context", "get_http_settings"]
