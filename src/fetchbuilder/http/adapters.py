# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Programmable fetch collaborator for tests and offline use."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from ..errors import TransportError
from .models import HttpResponse, RequestDescription


class StubFetch:
    """Deterministic, programmable Fetch for tests.

    Responses are keyed by full URL. Every call is recorded in ``calls`` before
    the outcome is produced, so failed calls are inspectable too.
    """

    def __init__(self, responses: Mapping[str, Any] | None = None, *, delay: float = 0.0):
        self._responses: dict[str, Any] = dict(responses or {})
        self._errors: dict[str, Exception] = {}
        self.delay = delay
        self.calls: list[tuple[str, RequestDescription]] = []

    def add(self, url: str, response: Any) -> None:
        """Register a response object, or a mapping turned into an HttpResponse."""
        if isinstance(response, Mapping):
            response = HttpResponse.from_mapping({"url": url, **response})
        self._responses[url] = response

    def fail(self, url: str, exc: Exception) -> None:
        """Make calls to ``url`` raise ``exc``."""
        self._errors[url] = exc

    @property
    def requests(self) -> list[RequestDescription]:
        return [init for _, init in self.calls]

    async def __call__(self, url: str, init: RequestDescription) -> Any:
        self.calls.append((url, init))
        if self.delay:
            await asyncio.sleep(self.delay)
        if init.signal is not None:
            init.signal.throw_if_aborted()
        if url in self._errors:
            raise self._errors[url]
        if url in self._responses:
            return self._responses[url]
        raise TransportError(f"No stubbed response configured for {url}")


__all__ = ["StubFetch"]
