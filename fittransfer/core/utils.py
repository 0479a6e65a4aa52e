import math


def round_half_up(value: float) -> int:
    """Round to the nearest whole number, with .5 always going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)
