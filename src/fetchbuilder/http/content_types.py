# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Known content-type values for the ``Content-Type`` header.

Advisory typing only; header values are never validated against this set.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, TypedDict, get_args

HTTPContentType = Literal[
    "application/java-archive",
    "application/EDI-X12",
    "application/javascript",
    "application/xml",
    "application/pdf",
    "application/octet-stream",
    "application/ogg",
    "application/zip",
    "application/xhtml+xml",
    "application/x-shockwave-flash",
    "application/json",
    "application/x-www-form-urlencoded",
    "application/ld+json",
    "application/EDIFACT",
    "audio/mpeg",
    "audio/vnd.rn-realaudio",
    "audio/x-wav",
    "audio/x-ms-wma",
    "image/gif",
    "image/tiff",
    "image/vnd.djvu",
    "image/jpeg",
    "image/svg+xml",
    "image/png",
    "image/x-icon",
    "image/vnd.microsoft.icon",
    "multipart/mixed",
    "multipart/related",
    "multipart/form-data",
    "multipart/alternative",
    "text/css",
    "text/javascript (obsolete)",
    "text/plain",
    "text/html",
    "text/xml",
    "text/csv",
    "video/mpeg",
    "video/x-ms-wmv",
    "video/x-msvideo",
    "video/webm",
    "video/mp4",
    "video/x-flv",
    "video/quicktime",
    "application/vnd.android.package-archive",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "application/vnd.mozilla.xul+xml",
    "application/vnd.oasis.opendocument.text",
    "application/vnd.oasis.opendocument.presentation",
    "application/vnd.oasis.opendocument.spreadsheet",
    "application/vnd.ms-powerpoint",
    "application/vnd.oasis.opendocument.graphics",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
]

CONTENT_TYPES: frozenset[str] = frozenset(get_args(HTTPContentType))

HTTPHeadersMap = TypedDict("HTTPHeadersMap", {"Content-Type": HTTPContentType}, total=False)

# Header mapping accepted by the builder. Reserved keys are typed through
# HTTPHeadersMap; any other caller header maps a string to any value.
HTTPHeaders = HTTPHeadersMap | Mapping[str, Any]


def is_known_content_type(value: str) -> bool:
    """Return True if value is one of the known content types (parameters such as charset are ignored)."""
    if not value:
        return False
    media_type = value.split(";", 1)[0].strip()
    return media_type in CONTENT_TYPES


__all__ = ["CONTENT_TYPES", "HTTPContentType", "HTTPHeaders", "HTTPHeadersMap", "is_known_content_type"]
