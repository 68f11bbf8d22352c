# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fetch collaborator abstraction and factory."""

from __future__ import annotations

from typing import Any, Protocol

from ..config import HttpSettings
from .models import RequestDescription


class Fetch(Protocol):
    """Minimal protocol for performing one HTTP exchange.

    Implementations either return a response object or raise; status codes are
    never turned into exceptions.
    """

    async def __call__(self, url: str, init: RequestDescription) -> Any: ...


def create_default_fetch(settings: HttpSettings | None = None) -> Fetch:
    """Factory for the default httpx-backed collaborator."""
    from .httpx_client import HttpxFetch

    return HttpxFetch(settings)
