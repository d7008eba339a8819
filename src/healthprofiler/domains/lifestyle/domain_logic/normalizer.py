"""Value normalization: raw answer values -> canonical typed fields.

Every function returns ``None`` for values it does not recognize. A
``None`` result means "absent", never an error.
"""

from __future__ import annotations

import math
from typing import Any

_TRUE_TOKENS = frozenset({"yes", "true", "y", "1"})
_FALSE_TOKENS = frozenset({"no", "false", "n", "0"})


def _is_number(value: Any) -> bool:
    # bool is an int subclass but is never treated as a number here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_bool(value: Any) -> bool | None:
    """Coerce yes/no style answers to a bool.

    >>> normalize_bool(" Yes ")
    True
    >>> normalize_bool(0)
    False
    >>> normalize_bool("maybe") is None
    True
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _TRUE_TOKENS:
            return True
        if token in _FALSE_TOKENS:
            return False
        return None
    if _is_number(value):
        return value != 0
    return None


def normalize_number(value: Any) -> int | float | None:
    """Coerce numbers and numeric strings; NaN, infinities and junk become ``None``."""
    if _is_number(value):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def normalize_text(value: Any) -> str | None:
    """Trim and lower-case free-text answers (exercise, diet)."""
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    return value.strip().lower()
