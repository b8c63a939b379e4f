"""Small numeric helpers shared by the calculators."""

import math


def round_half_up(value):
    """Round to the nearest integer, halves away from negative infinity.

    The built-in ``round`` uses banker's rounding (``round(0.5) == 0``), which
    disagrees with the published calculators on exact .5 results.
    """
    return int(math.floor(value + 0.5))


def to_float(raw, fallback=0.0):
    if raw is None or raw == "":
        return fallback
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return fallback
    if math.isnan(value):
        return fallback
    return value


def to_int(raw, fallback=0):
    if raw is None or raw == "":
        return fallback
    try:
        return int(float(raw))
    except (TypeError, ValueError):
        return fallback
