# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP collaborator exports."""

from .abort import AbortController, AbortSignal
from .adapters import StubFetch
from .client import Fetch, create_default_fetch
from .content_types import CONTENT_TYPES, HTTPContentType, HTTPHeaders, HTTPHeadersMap, is_known_content_type
from .context import FetchContext, fetch_context, get_fetch_context, get_http_settings
from .headers import clone_headers, has_header, header_value, merge_headers, normalize_headers
from .httpx_client import HttpxFetch
from .models import (
    BuildSettings,
    HTTPMethod,
    HttpResponse,
    HttpResult,
    RequestDescription,
    RequestInit,
)

__all__ = [
    "CONTENT_TYPES",
    "AbortController",
    "AbortSignal",
    "BuildSettings",
    "Fetch",
    "FetchContext",
    "HTTPContentType",
    "HTTPHeaders",
    "HTTPHeadersMap",
    "HTTPMethod",
    "HttpResponse",
    "HttpResult",
    "HttpxFetch",
    "RequestDescription",
    "RequestInit",
    "StubFetch",
    "clone_headers",
    "create_default_fetch",
    "fetch_context",
    "get_fetch_context",
    "get_http_settings",
    "has_header",
    "header_value",
    "is_known_content_type",
    "merge_headers",
    "normalize_headers",
]
