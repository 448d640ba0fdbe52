from __future__ import annotations


def triangle_integral(a: float, b: float) -> float:
    """Trapezoid area between two consecutive calibrated samples.

    Unit sample spacing, so the area is the mean of the two heights.
    """
    return abs(float(a) + 0.5 * float(b - a))
