"""Integer rounding helpers shared by the stats calculators."""
from __future__ import annotations


def round_half_up(numerator: int, denominator: int) -> int:
    """Round ``numerator / denominator`` to the nearest integer, ties upward.

    Both operands must be non-negative integers and ``denominator`` positive.
    Works in integer arithmetic so ``0.5`` boundaries are exact, unlike
    :func:`round` which rounds ties to even.
    """

    if denominator <= 0:
        raise ValueError("denominator must be positive")
    return (2 * numerator + denominator) // (2 * denominator)


def percentage(part: int, whole: int) -> int:
    """Return ``part / whole`` as a rounded integer percentage."""

    return round_half_up(part * 100, whole)
