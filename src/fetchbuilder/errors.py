# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport error types and exception helpers."""

from __future__ import annotations

import json
import socket
import ssl as ssl_module
from enum import Enum
from typing import Any

import httpx


class TransportError(Exception):
    """Base class for failures raised by fetchbuilder's own fetch collaborators."""


class AbortError(TransportError):
    """The request was cancelled through its abort signal."""

    def __init__(self, reason: Any = None):
        self.reason = reason
        message = "The operation was aborted"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)


class IntegrityError(TransportError):
    """The response body did not match the request's integrity metadata."""


class RedirectError(TransportError):
    """A redirect was returned while the redirect policy was ``"error"``."""


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    ABORTED = "ABORTED"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    INTEGRITY_ERROR = "INTEGRITY_ERROR"
    REDIRECT_ERROR = "REDIRECT_ERROR"
    SERIALIZATION_ERROR = "SERIALIZATION_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


def categorize_exception(exc: BaseException | None) -> ErrorCategory:
    """
    Map a captured request error to an ErrorCategory.

    The builder returns errors as-is; this is only for callers that want to
    branch on the cause.
    """
    if exc is None:
        return ErrorCategory.NONE

    if isinstance(exc, AbortError):
        return ErrorCategory.ABORTED

    if isinstance(exc, IntegrityError):
        return ErrorCategory.INTEGRITY_ERROR

    if isinstance(exc, (RedirectError, httpx.TooManyRedirects)):
        return ErrorCategory.REDIRECT_ERROR

    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return ErrorCategory.TIMEOUT

    # httpx wraps TLS and DNS failures in ConnectError; look at the cause first.
    cause = exc.__cause__ or exc.__context__
    if isinstance(cause, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR
    if isinstance(cause, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (TypeError, ValueError)) and not isinstance(exc, json.JSONDecodeError):
        return ErrorCategory.SERIALIZATION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout during request",
        ErrorCategory.ABORTED: "Request aborted by caller",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.INTEGRITY_ERROR: "Response body failed integrity check",
        ErrorCategory.REDIRECT_ERROR: "Unexpected redirect",
        ErrorCategory.SERIALIZATION_ERROR: "Request body could not be encoded",
        ErrorCategory.UNKNOWN_ERROR: "Network error during request",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Request failed due to network error")


__all__ = [
    "AbortError",
    "ErrorCategory",
    "IntegrityError",
    "RedirectError",
    "TransportError",
    "categorize_exception",
    "error_category_to_reason",
]
