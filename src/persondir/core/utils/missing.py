"""Missing value detection shared by row builders and frame adapters."""

from __future__ import annotations

import math
from typing import Any

__all__ = ["is_missing"]


def is_missing(value: Any) -> bool:
    """Return ``True`` when *value* should be treated as an absent cell.

    ``None``, float ``NaN`` and blank strings are missing.  Every other value,
    including ``0``, ``False`` and empty containers, is present.
    """

    if value is None:
        return True

    if isinstance(value, float) and math.isnan(value):
        return True

    if isinstance(value, str):
        return value.strip() == ""

    return False
