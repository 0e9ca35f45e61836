"""Rounding helpers matching the dashboard's displayed values."""

from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves towards positive infinity (``2008.5 -> 2009``).

    ``round`` uses banker's rounding, which would show different targets than
    the rest of the dashboard for exact halves.
    """

    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(round_half_up(value))
