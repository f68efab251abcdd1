"""Parsing of the ``USAGE_*`` environment variables.

Every helper returns None for an unset or blank variable, so callers can fall
back to their defaults.
"""

from __future__ import annotations

TRUTHY = frozenset({"1", "true", "yes", "on"})


def parse_str_env(value: str | None) -> str | None:
    """Return a stripped string, or None for unset/blank values."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_bool_env(value: str | None) -> bool | None:
    """True for 1/true/yes/on in any case, False for any other non-blank text."""
    text = parse_str_env(value)
    if text is None:
        return None
    return text.lower() in TRUTHY


def parse_int_env(value: str | None) -> int | None:
    """Integer value, or None when blank or not a base-10 integer."""
    text = parse_str_env(value)
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        return None
