# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request/response data models shared by the builder and fetch collaborators."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Generic, Literal, TypeVar, cast

from .content_types import HTTPHeaders
from .headers import header_value

CacheMode = Literal["default", "force-cache", "no-cache", "no-store", "only-if-cached", "reload"]
CredentialsMode = Literal["include", "omit", "same-origin"]
CorsMode = Literal["cors", "navigate", "no-cors", "same-origin"]
RedirectPolicy = Literal["error", "follow", "manual"]
ReferrerPolicy = Literal[
    "",
    "no-referrer",
    "no-referrer-when-downgrade",
    "origin",
    "origin-when-cross-origin",
    "same-origin",
    "strict-origin",
    "strict-origin-when-cross-origin",
    "unsafe-url",
]

ResponseT = TypeVar("ResponseT")
# Decoded JSON body shape of a response.
S = TypeVar("S")

# (response, error): error is None on success, response is a placeholder on failure.
HttpResult = tuple[ResponseT, Exception | None]


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    HEAD = "HEAD"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"


@dataclass
class RequestInit:
    """Optional request settings forwarded unmodified to the fetch collaborator."""

    cache: CacheMode | None = None
    credentials: CredentialsMode | None = None
    integrity: str | None = None
    keepalive: bool | None = None
    mode: CorsMode | None = None
    redirect: RedirectPolicy | None = None
    referrer: str | None = None
    referrer_policy: ReferrerPolicy | None = None
    signal: Any = None
    window: Any = None

    @classmethod
    def coerce(cls, init: RequestInit | Mapping[str, Any] | None) -> RequestInit:
        """Accept a RequestInit, a mapping of the same field names, or None."""
        if init is None:
            return cls()
        if isinstance(init, RequestInit):
            return init
        known = {f.name for f in fields(cls)}
        unknown = set(init) - known
        if unknown:
            raise TypeError(f"Unknown RequestInit fields: {', '.join(sorted(unknown))}")
        return cls(**dict(init))

    def passthrough(self) -> dict[str, Any]:
        """Field-by-field copy; values are not copied, so signals keep their identity."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class RequestDescription:
    """Everything the fetch collaborator needs besides the URL."""

    method: str = HTTPMethod.GET.value
    headers: dict[str, Any] | None = None
    body: str | None = None
    cache: CacheMode | None = None
    credentials: CredentialsMode | None = None
    integrity: str | None = None
    keepalive: bool | None = None
    mode: CorsMode | None = None
    redirect: RedirectPolicy | None = None
    referrer: str | None = None
    referrer_policy: ReferrerPolicy | None = None
    signal: Any = None
    window: Any = None

    @classmethod
    def from_init(
        cls,
        init: RequestInit,
        *,
        method: HTTPMethod | str,
        headers: dict[str, Any] | None,
        body: str | None,
    ) -> RequestDescription:
        return cls(
            method=_method_value(method),
            headers=headers,
            body=body,
            **init.passthrough(),
        )


@dataclass
class BuildSettings:
    """Static settings baked into a handle by ``HTTPRequestBuilder.build``."""

    endpoint: str
    method: HTTPMethod | str
    headers: HTTPHeaders = field(default_factory=dict)
    init: RequestInit | Mapping[str, Any] | None = None


@dataclass
class HttpResponse(Generic[S]):
    """HTTP response returned by the httpx collaborator, or an empty placeholder on failure."""

    ok: bool
    status_code: int | None = None
    headers: dict[str, str] = field(default_factory=dict)
    text: str = ""
    content: bytes = b""
    url: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        """True for a 2xx status. Transport success alone is reported by ``ok``."""
        return self.status_code is not None and 200 <= self.status_code < 300

    def header(self, name: str, default: str = "") -> str:
        return header_value(self.headers, name, default)

    def json(self) -> S:
        """Decode the body as JSON. The result is not checked against ``S``."""
        return cast(S, json.loads(self.text or self.content.decode("utf-8")))

    @classmethod
    def placeholder(cls, exc: BaseException) -> HttpResponse[Any]:
        """Empty response paired with a captured error."""
        return cls(ok=False, error_message=str(exc), error_type=type(exc).__name__)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> HttpResponse[Any]:
        """Build a response from a plain dict (handy for stubs and recorded fixtures)."""
        raw_headers: Any = data.get("headers") or {}
        headers: dict[str, str] = {}
        if isinstance(raw_headers, Mapping):
            for key, value in raw_headers.items():
                if key is None:
                    continue
                headers[str(key).lower()] = "" if value is None else str(value)

        raw_body = data.get("body")
        if "json" in data and raw_body is None:
            raw_body = json.dumps(data["json"])
        content: bytes = b""
        text: str = ""
        if isinstance(raw_body, (bytes, bytearray, memoryview)):
            content = bytes(raw_body)
            text = content.decode("utf-8", errors="replace")
        elif isinstance(raw_body, str):
            text = raw_body
            content = raw_body.encode("utf-8")

        status_code = data.get("status_code", 200)
        return cls(
            ok=bool(data.get("ok", True)),
            status_code=status_code,
            headers=headers,
            text=text,
            content=content,
            url=data.get("url"),
            error_message=data.get("error_message"),
            error_type=data.get("error_type"),
            meta={k: v for k, v in data.items() if k not in {"ok", "status_code", "headers", "body", "json", "url", "error_message", "error_type"}},
        )


def _method_value(method: HTTPMethod | str) -> str:
    if isinstance(method, HTTPMethod):
        return method.value
    return str(method)
