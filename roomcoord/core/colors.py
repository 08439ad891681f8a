"""Display colors handed out to participants on connect."""

from __future__ import annotations

from collections.abc import Sequence

PLAYER_COLORS = (
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#FFA07A",
    "#98D8C8",
    "#F7DC6F",
    "#BB8FCE",
    "#85C1E2",
)


class ColorCycler:
    """Round-robin over a palette; wraps once every color has been used."""

    def __init__(self, palette: Sequence[str] = PLAYER_COLORS) -> None:
        if not palette:
            raise ValueError("palette must not be empty")
        self._palette = tuple(palette)
        self._index = 0

    def next_color(self) -> str:
        color = self._palette[self._index % len(self._palette)]
        self._index += 1
        return color
