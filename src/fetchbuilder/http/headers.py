# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header mapping utilities.

Request headers are plain dicts whose values may be any JSON-compatible value.
Builder defaults are cloned before every merge so a call never writes back into
shared state. Response headers are normalized to lowercase string mappings.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any


def clone_headers(headers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a deep copy of a header mapping that shares no nested values with the original."""
    if not headers:
        return {}
    return copy.deepcopy(dict(headers))


def merge_headers(base: Mapping[str, Any] | None, overrides: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Right-biased merge of two header mappings.

    Keys from ``overrides`` win; keys only in ``base`` keep their value. Nothing is
    removed and neither input is modified.
    """
    merged: dict[str, Any] = dict(base or {})
    for key, value in (overrides or {}).items():
        merged[key] = value
    return merged


def _coerce_headers_mapping(headers: Any) -> Mapping[object, object] | None:
    """
    Best-effort coercion of "dict-like" header containers into a Mapping.

    Handles plain dicts, httpx.Headers, objects exposing ``.items()`` and
    iterables of pairs.
    """
    if not headers:
        return None
    if isinstance(headers, Mapping):
        return headers

    items = getattr(headers, "items", None)
    if callable(items):
        try:
            return dict(items())
        except (TypeError, ValueError):
            pass

    try:
        return dict(headers)
    except (TypeError, ValueError):
        return None


def normalize_headers(headers: Any) -> dict[str, str]:
    """Return a lowercase-keyed string copy of a header mapping."""
    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return {}
    out: dict[str, str] = {}
    for key, value in coerced.items():
        if key is None:
            continue
        name = str(key).strip().lower()
        if not name:
            continue
        out[name] = "" if value is None else str(value)
    return out


def header_value(headers: Any, name: str, default: str = "") -> str:
    """
    Return a header value using case-insensitive key matching.

    Fast-paths common key casings before falling back to a full scan.
    """
    if not headers or not name:
        return default

    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return default

    lower = str(name).lower()
    for key in (name, lower, lower.title()):
        if key in coerced:
            value = coerced.get(key)
            return default if value is None else str(value).strip()

    for key, value in coerced.items():
        if key is None:
            continue
        if str(key).lower() == lower:
            return default if value is None else str(value).strip()

    return default


def has_header(headers: Mapping[str, Any] | None, name: str) -> bool:
    """Return True if a header is present under any casing."""
    if not headers:
        return False
    lower = name.lower()
    return any(str(key).lower() == lower for key in headers)


__all__ = ["clone_headers", "has_header", "header_value", "merge_headers", "normalize_headers"]
