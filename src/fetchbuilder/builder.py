# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
HTTP request builder.

An HTTPRequestBuilder holds a host and default headers and produces awaitable
handles bound to an endpoint. Three construction modes are available:

- ``request``: issue one request immediately (default headers are not applied).
- ``define_request``: a reusable handle taking body, method and headers per call.
- ``build``: a handle with a fixed method and headers, taking only the body.

Every call resolves to ``(response, error)``. Exceptions from body encoding or
the fetch collaborator are captured into ``error`` next to a placeholder
response; HTTP status codes are never treated as errors.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from .http.client import Fetch, create_default_fetch
from .http.content_types import HTTPHeaders
from .http.context import get_fetch_context
from .http.headers import clone_headers, merge_headers
from .http.models import (
    BuildSettings,
    HTTPMethod,
    HttpResponse,
    HttpResult,
    RequestDescription,
    RequestInit,
)

logger = logging.getLogger(__name__)

# Request body shape and decoded response shape; typing only, never checked at runtime.
Q = TypeVar("Q")
S = TypeVar("S")

InitLike = RequestInit | Mapping[str, Any] | None


def _has_payload(body: Any) -> bool:
    """Falsy scalars (None, False, 0, NaN, "") carry no payload; containers always do, even empty."""
    if body is None:
        return False
    if isinstance(body, float):
        return bool(body) and not math.isnan(body)
    if isinstance(body, (bool, int, str)):
        return bool(body)
    return True


def _json_compatible(value: Any) -> Any:
    # Non-finite floats have no JSON form; they are written as null.
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Mapping):
        return {key: _json_compatible(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_compatible(item) for item in value]
    return value


def _encode(body: Any) -> str:
    return json.dumps(_json_compatible(body), allow_nan=False)


class HTTPRequestBuilder:
    """Factory for requests and request handles against one host."""

    def __init__(self, host: str, headers: HTTPHeaders | None = None, *, fetch: Fetch | None = None):
        """
        Args:
            host: URL prefix, e.g. ``http://api.example:1234`` or ``http://api.example/api/``.
                Endpoints are appended verbatim.
            headers: default headers for handles made by ``define_request`` and ``build``.
            fetch: collaborator performing the exchange. Defaults to the ambient
                ``fetch_context`` collaborator, then to an httpx-backed one.
        """
        self._host = host
        self._headers: dict[str, Any] = dict(headers) if headers is not None else {}
        self._fetch = fetch

    @property
    def host(self) -> str:
        return self._host

    @property
    def headers(self) -> Mapping[str, Any]:
        return MappingProxyType(self._headers)

    def clone_headers(self) -> dict[str, Any]:
        """Deep copy of the default headers, safe to mutate."""
        return clone_headers(self._headers)

    def _resolve_fetch(self) -> Fetch:
        if self._fetch is not None:
            return self._fetch
        ambient = get_fetch_context().fetch
        if ambient is not None:
            return ambient
        return create_default_fetch()

    async def _dispatch(self, url: str, describe: Callable[[], RequestDescription]) -> HttpResult[Any]:
        try:
            description = describe()
            response = await self._resolve_fetch()(url, description)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Request to %s failed: %s: %s", url, type(exc).__name__, exc)
            return HttpResponse.placeholder(exc), exc
        return response, None

    async def request(
        self,
        endpoint: str,
        method: HTTPMethod | str,
        body: Q | None = None,
        headers: HTTPHeaders | None = None,
        init: InitLike = None,
    ) -> HttpResult[HttpResponse[S]]:
        """
        Make a one-off request to ``host + endpoint``.

        Only the given ``headers`` are sent; the builder's default headers are
        not applied in this mode.
        """
        url = self._host + endpoint

        def describe() -> RequestDescription:
            return RequestDescription.from_init(
                RequestInit.coerce(init),
                method=method,
                headers=dict(headers) if headers is not None else None,
                body=_encode(body) if _has_payload(body) else None,
            )

        return await self._dispatch(url, describe)

    def define_request(self, endpoint: str, init: InitLike = None) -> DynamicHandle[Q, S]:
        """
        Define a reusable handle for ``endpoint``.

        The handle takes ``(body, method, headers)`` on every call; per-call
        headers are merged over the builder defaults. Bind the body and
        response types by annotating the result, e.g.
        ``users: DynamicHandle[NewUser, User] = api.define_request("/users")``.
        """
        return DynamicHandle(
            builder=self,
            url=self._host + endpoint,
            init=RequestInit.coerce(init),
        )

    def build(self, settings: BuildSettings) -> StaticHandle[Q, S]:
        """
        Build a fully bound handle from static settings.

        The handle only takes the request data. Method, request-specific headers
        and init are fixed here and cannot be overridden per call.
        """
        return StaticHandle(
            builder=self,
            url=self._host + settings.endpoint,
            method=settings.method,
            headers=clone_headers(settings.headers),
            init=RequestInit.coerce(settings.init),
        )

    def __repr__(self) -> str:
        return f"HTTPRequestBuilder(host={self._host!r})"


@dataclass(frozen=True)
class DynamicHandle(Generic[Q, S]):
    """Handle returned by ``define_request``. The method is required on every call."""

    builder: HTTPRequestBuilder
    url: str
    init: RequestInit

    def describe(
        self,
        body: Q | None,
        method: HTTPMethod | str,
        headers: HTTPHeaders | None = None,
    ) -> RequestDescription:
        return RequestDescription.from_init(
            self.init,
            method=method,
            headers=merge_headers(self.builder.clone_headers(), headers),
            body=_encode(body) if _has_payload(body) else None,
        )

    async def __call__(
        self,
        body: Q | None,
        method: HTTPMethod | str,
        headers: HTTPHeaders | None = None,
    ) -> HttpResult[HttpResponse[S]]:
        return await self.builder._dispatch(self.url, lambda: self.describe(body, method, headers))


@dataclass(frozen=True)
class StaticHandle(Generic[Q, S]):
    """Handle returned by ``build``; its only argument is the request data."""

    builder: HTTPRequestBuilder
    url: str
    method: HTTPMethod | str
    headers: dict[str, Any] = field(default_factory=dict)
    init: RequestInit = field(default_factory=RequestInit)

    def describe(self, data: Q | None = None) -> RequestDescription:
        # None is the only "no body" value here; 0, "" and False are encoded.
        return RequestDescription.from_init(
            self.init,
            method=self.method,
            headers=merge_headers(self.builder.clone_headers(), self.headers),
            body=_encode(data) if data is not None else None,
        )

    async def __call__(self, data: Q | None = None) -> HttpResult[HttpResponse[S]]:
        return await self.builder._dispatch(self.url, lambda: self.describe(data))


__all__ = ["DynamicHandle", "HTTPRequestBuilder", "StaticHandle"]
