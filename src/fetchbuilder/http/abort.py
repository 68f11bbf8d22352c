# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Cancellation signals for in-flight requests."""

from __future__ import annotations

import asyncio
from typing import Any

from ..errors import AbortError


class AbortSignal:
    """Read side of an AbortController; pass it as ``RequestInit.signal``."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: Any = None

    @property
    def aborted(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        """Block until the signal is aborted."""
        await self._event.wait()

    def throw_if_aborted(self) -> None:
        if self.aborted:
            raise AbortError(self.reason)

    def _abort(self, reason: Any) -> None:
        if self.aborted:
            return
        self.reason = reason
        self._event.set()

    def __repr__(self) -> str:
        return f"AbortSignal(aborted={self.aborted!r})"


class AbortController:
    """Owns an AbortSignal and triggers it."""

    def __init__(self) -> None:
        self.signal = AbortSignal()

    def abort(self, reason: Any = None) -> None:
        """Abort the signal. Only the first call records a reason."""
        self.signal._abort(reason)


__all__ = ["AbortController", "AbortSignal"]
