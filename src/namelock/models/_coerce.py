"""Lenient scalar coercion for gateway payload fields."""

from __future__ import annotations

from typing import Any


def loose_str(value: Any) -> str | None:
    """Coerce *value* to text the way a truthiness check would see it.

    Falsy values (``None``, ``""``, ``0``, ``False``, empty containers)
    become ``None`` so field fallbacks apply. Any other value is turned
    into its string form instead of failing validation.
    """
    if not value:
        return None
    if isinstance(value, str):
        return value
    return str(value)
