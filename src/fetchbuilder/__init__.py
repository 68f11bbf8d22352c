# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
fetchbuilder package entrypoint.

Typed HTTP client factory: an HTTPRequestBuilder binds a host and default
headers, and produces awaitable handles that return ``(response, error)``
pairs. Network I/O goes through an injectable fetch collaborator (httpx by
default).
"""

from .builder import DynamicHandle, HTTPRequestBuilder, StaticHandle
from .config import HttpSettings, load_http_settings
from .errors import (
    AbortError,
    ErrorCategory,
    IntegrityError,
    RedirectError,
    TransportError,
    categorize_exception,
    error_category_to_reason,
)
from .http import (
    AbortController,
    AbortSignal,
    BuildSettings,
    Fetch,
    HTTPHeaders,
    HTTPMethod,
    HttpResponse,
    HttpResult,
    HttpxFetch,
    RequestDescription,
    RequestInit,
    StubFetch,
    create_default_fetch,
    fetch_context,
)
from .log import setup_logging
from .version import __version__

__all__ = [
    "AbortController",
    "AbortError",
    "AbortSignal",
    "BuildSettings",
    "DynamicHandle",
    "ErrorCategory",
    "Fetch",
    "HTTPHeaders",
    "HTTPMethod",
    "HTTPRequestBuilder",
    "HttpResponse",
    "HttpResult",
    "HttpSettings",
    "HttpxFetch",
    "IntegrityError",
    "RedirectError",
    "RequestDescription",
    "RequestInit",
    "StaticHandle",
    "StubFetch",
    "TransportError",
    "categorize_exception",
    "create_default_fetch",
    "error_category_to_reason",
    "fetch_context",
    "load_http_settings",
    "setup_logging",
    "__version__",
]
