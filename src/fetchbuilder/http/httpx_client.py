# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed Fetch implementation."""

from __future__ import annotations

import asyncio
import base64
import hashlib
import hmac
import logging
from collections.abc import Awaitable
from typing import Any

import httpx

from ..config import HttpSettings
from ..errors import AbortError, IntegrityError, RedirectError
from .context import get_http_settings
from .headers import has_header, normalize_headers
from .models import HttpResponse, RequestDescription

logger = logging.getLogger(__name__)

_FALLBACK_MAX_BODY_BYTES = 16 * 1024 * 1024

_INTEGRITY_ALGORITHMS = {
    "sha256": hashlib.sha256,
    "sha384": hashlib.sha384,
    "sha512": hashlib.sha512,
}

# Fields with no httpx counterpart; accepted and dropped.
_IGNORED_INIT_FIELDS = ("credentials", "mode", "keepalive", "referrer_policy", "window")


class HttpxFetch:
    """Asynchronous httpx collaborator.

    Without an injected client a fresh ``httpx.AsyncClient`` is opened per call,
    so nothing outlives the request and instances are safe to share across event
    loops.
    """

    def __init__(
        self,
        settings: HttpSettings | None = None,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings
        self._client = client
        self._transport = transport

    @property
    def settings(self) -> HttpSettings:
        return self._settings or get_http_settings()

    async def __call__(self, url: str, init: RequestDescription) -> HttpResponse:
        settings = self.settings
        signal = init.signal
        if signal is not None:
            signal.throw_if_aborted()
        self._log_ignored_fields(init)

        headers = _request_headers(init, settings)
        follow_redirects = _follow_redirects(init, settings)
        exchange = self._exchange(url, init, headers, follow_redirects, settings)
        if signal is None:
            response = await exchange
        else:
            response = await _race_signal(exchange, signal, url)

        if init.redirect == "error" and _is_redirect(response):
            raise RedirectError(f"Redirect to {response.header('location')} while redirect policy is 'error'")
        if init.integrity:
            _check_integrity(init.integrity, response.content)
        return response

    async def _exchange(
        self,
        url: str,
        init: RequestDescription,
        headers: dict[str, str],
        follow_redirects: bool,
        settings: HttpSettings,
    ) -> HttpResponse:
        if self._client is not None:
            return await self._send(self._client, url, init, headers, follow_redirects, settings)
        async with httpx.AsyncClient(
            timeout=settings.timeout,
            verify=settings.verify_ssl,
            transport=self._transport,
        ) as client:
            return await self._send(client, url, init, headers, follow_redirects, settings)

    async def _send(
        self,
        client: httpx.AsyncClient,
        url: str,
        init: RequestDescription,
        headers: dict[str, str],
        follow_redirects: bool,
        settings: HttpSettings,
    ) -> HttpResponse:
        max_body_bytes = settings.max_body_bytes
        if max_body_bytes <= 0:
            max_body_bytes = _FALLBACK_MAX_BODY_BYTES

        async with client.stream(
            init.method,
            url,
            headers=headers,
            content=init.body,
            timeout=settings.timeout,
            follow_redirects=follow_redirects,
        ) as resp:
            content = bytearray()
            truncated = False
            async for chunk in resp.aiter_bytes():
                if not chunk:
                    continue
                remaining = max_body_bytes - len(content)
                if remaining <= 0:
                    truncated = True
                    break
                if len(chunk) > remaining:
                    content.extend(chunk[:remaining])
                    truncated = True
                    break
                content.extend(chunk)

            encoding = resp.encoding or "utf-8"
            try:
                text = bytes(content).decode(encoding, errors="replace")
            except LookupError:
                text = bytes(content).decode("utf-8", errors="replace")

        return HttpResponse(
            ok=True,
            status_code=resp.status_code,
            headers=normalize_headers(resp.headers),
            text=text,
            content=bytes(content),
            url=str(resp.url),
            meta={
                "body_truncated": truncated,
                "body_bytes_read": len(content),
                "body_bytes_limit": max_body_bytes,
            },
        )

    def _log_ignored_fields(self, init: RequestDescription) -> None:
        ignored = [name for name in _IGNORED_INIT_FIELDS if getattr(init, name) is not None]
        if ignored:
            logger.debug("Ignoring init fields without httpx equivalent: %s", ", ".join(ignored))

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()


def _request_headers(init: RequestDescription, settings: HttpSettings) -> dict[str, str]:
    headers = {str(key): str(value) for key, value in (init.headers or {}).items() if value is not None}
    if not has_header(headers, "User-Agent"):
        headers["User-Agent"] = settings.user_agent

    if init.cache in ("no-store", "reload"):
        if not has_header(headers, "Cache-Control"):
            headers["Cache-Control"] = "no-cache"
        if not has_header(headers, "Pragma"):
            headers["Pragma"] = "no-cache"
    elif init.cache == "no-cache" and not has_header(headers, "Cache-Control"):
        headers["Cache-Control"] = "max-age=0"

    if init.referrer and init.referrer != "about:client" and not has_header(headers, "Referer"):
        headers["Referer"] = init.referrer
    return headers


def _follow_redirects(init: RequestDescription, settings: HttpSettings) -> bool:
    if init.redirect is None:
        return settings.allow_redirects
    return init.redirect == "follow"


def _is_redirect(response: HttpResponse) -> bool:
    status = response.status_code or 0
    return 300 <= status < 400 and bool(response.header("location"))


def _check_integrity(integrity: str, content: bytes) -> None:
    """Verify subresource-integrity style metadata; unsupported algorithms are skipped."""
    expected: list[tuple[Any, str]] = []
    for token in integrity.split():
        algorithm, _, digest = token.partition("-")
        digest = digest.split("?", 1)[0]
        hasher = _INTEGRITY_ALGORITHMS.get(algorithm.lower())
        if hasher is not None and digest:
            expected.append((hasher, digest))
    if not expected:
        return

    for hasher, digest in expected:
        actual = base64.b64encode(hasher(content).digest()).decode("ascii")
        if hmac.compare_digest(actual, digest):
            return
    raise IntegrityError(f"Response body does not match integrity metadata {integrity!r}")


async def _race_signal(exchange: Awaitable[HttpResponse], signal: Any, url: str) -> HttpResponse:
    request_task = asyncio.ensure_future(exchange)
    abort_task = asyncio.ensure_future(signal.wait())
    try:
        done, _ = await asyncio.wait({request_task, abort_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        pending = [task for task in (request_task, abort_task) if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    if request_task in done:
        return request_task.result()
    logger.debug("Request to %s aborted: %s", url, signal.reason)
    raise AbortError(signal.reason)


__all__ = ["HttpxFetch"]
