"""Monetary rounding utilities"""

import math


def round2(value: float) -> float:
    """Round to 2 decimal places, halves on the cent going away from zero"""
    scaled = abs(value) * 100
    return math.copysign(math.floor(scaled + 0.5) / 100, value)
