"""Deterministic color assignment for new motors."""

from __future__ import annotations

import colorsys
import random


class ColorSequence:
    """Seeded generator of display colors.

    Colors are random hues at fixed saturation and value (200/255 each),
    returned as "#rrggbb". The same seed always yields the same sequence.

    Example:
        >>> a, b = ColorSequence(seed=7), ColorSequence(seed=7)
        >>> a.next() == b.next()
        True
    """

    SATURATION = 200 / 255
    VALUE = 200 / 255

    def __init__(self, seed: int = 0) -> None:
        self._rng = random.Random(seed)

    def next(self) -> str:
        hue = self._rng.randrange(360) / 360.0
        r, g, b = colorsys.hsv_to_rgb(hue, self.SATURATION, self.VALUE)
        return f"#{round(r * 255):02x}{round(g * 255):02x}{round(b * 255):02x}"

    def __iter__(self) -> ColorSequence:
        return self

    def __next__(self) -> str:
        return self.next()
