"""Helpers for safe debug logging.

Requests to the push provider carry the REST API key in the
``Authorization`` header and the app id in the body.  Message bodies can be
long once every locale is attached.  :func:`redact_for_log` masks the former
and shortens the latter before anything reaches a DEBUG log.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_KEYS: frozenset[str] = frozenset({"authorization", "app_id", "rest_key", "api_key", "cookie"})
_MASK = "<redacted>"


def _shorten(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}…<+{len(text) - limit} chars>"


def redact_for_log(value: Any, *, max_string: int = 256) -> Any:
    """Return a copy of *value* with credentials masked and long strings cut."""
    if isinstance(value, str):
        return _shorten(value, max_string)
    if isinstance(value, Mapping):
        return {
            str(key): _MASK if str(key).lower() in _SENSITIVE_KEYS else redact_for_log(item, max_string=max_string)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string) for item in value]
    return value
