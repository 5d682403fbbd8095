"""Numeric code parsing for catalogue key columns."""

from __future__ import annotations

import re

_DIGITS_RE = re.compile(r"^\d+$")


def is_numeric_code(value: str | None) -> bool:
    if value is None:
        return False
    return bool(_DIGITS_RE.match(value.strip()))


def parse_code(raw: str | None) -> int | None:
    """Parse a zero-padded source code such as ``"09"`` or ``"01000"``.

    Empty values map to ``None``; anything else must be a digit string.
    """
    if raw is None:
        return None

    cleaned = raw.strip()
    if not cleaned:
        return None
    if not _DIGITS_RE.match(cleaned):
        raise ValueError(f"Not a numeric code: {raw!r}")
    return int(cleaned)


def has_text(value: str | None) -> bool:
    return bool(value and value.strip())
