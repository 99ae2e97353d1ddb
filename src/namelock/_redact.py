"""Masking of session secrets in DEBUG logs.

Every gateway request carries the browser session cookies in a ``cookie``
header, and the broker password is the same header. Anything logged from
the transport or the notification runtime goes through
:func:`redact_for_log` first.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_MASK = "<redacted>"

# Cookie names from exported app states, plus generic credential keys.
_SECRET_KEYS: frozenset[str] = frozenset(
    {
        "c_user",
        "xs",
        "fr",
        "datr",
        "sb",
        "fb_dtsg",
        "password",
        "authorization",
        "token",
        "appstate",
    }
)


def redact_cookie_header(header: str) -> str:
    """Keep cookie names, mask their values.

    ``"c_user=42; xs=abc"`` becomes ``"c_user=<redacted>; xs=<redacted>"``.
    """
    parts = []
    for pair in header.split(";"):
        name, sep, _value = pair.strip().partition("=")
        if not name:
            continue
        parts.append(f"{name}={_MASK}" if sep else name)
    return "; ".join(parts)


def _redact_entry(key: str, value: Any, max_string: int, depth: int) -> Any:
    lowered = key.lower()
    if lowered == "cookie" and isinstance(value, str):
        return redact_cookie_header(value)
    if lowered in _SECRET_KEYS or lowered == "cookies":
        return _MASK
    return redact_for_log(value, max_string=max_string, _depth=depth + 1)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a copy of *value* with session secrets masked and long text cut."""
    if _depth > 20:
        return "<max-depth>"
    if isinstance(value, Mapping):
        return {str(k): _redact_entry(str(k), v, max_string, _depth) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]
    if isinstance(value, str) and len(value) > max_string:
        return f"{value[:max_string]}…<truncated>"
    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"
    return value
