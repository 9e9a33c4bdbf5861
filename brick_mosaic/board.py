"""Colour-indexed board: one palette index (or no colour) per peg."""

from __future__ import annotations

import numpy as np

from brick_mosaic.color_utils import NO_COLOR, match_colors
from brick_mosaic.geometry import Vec2, in_bounds


class ColorBoard:
    """Read-only (H, W) grid of palette indices.

    Cells hold a palette index ``>= 0`` or :data:`NO_COLOR` for pegs that
    must stay empty (transparent source pixels).
    """

    def __init__(self, colors: np.ndarray) -> None:
        if colors.ndim != 2:
            raise ValueError(f"Board must be 2-D, got shape {colors.shape}")
        self._colors = np.array(colors, dtype=np.int32)
        self._colors.flags.writeable = False
        self._colorable = int(np.count_nonzero(self._colors >= 0))

    @classmethod
    def from_pixels(
        cls,
        rgba: np.ndarray,
        palette: np.ndarray,
        color_space: str = "rgb",
        dither: bool = False,
    ) -> ColorBoard:
        """Match an (H, W, 4) RGBA image against a (K, 3) palette."""
        return cls(match_colors(rgba, palette, color_space=color_space, dither=dither))

    @property
    def colors(self) -> np.ndarray:
        return self._colors

    @property
    def width(self) -> int:
        return self._colors.shape[1]

    @property
    def height(self) -> int:
        return self._colors.shape[0]

    @property
    def size(self) -> Vec2:
        return Vec2(self.width, self.height)

    @property
    def colorable_count(self) -> int:
        """Number of pegs that must end up covered."""
        return self._colorable

    def in_bounds(self, pos: Vec2) -> bool:
        return in_bounds(pos, self.size)

    def color_at(self, pos: Vec2) -> int:
        """Palette index at ``pos``; :data:`NO_COLOR` outside the board."""
        if not self.in_bounds(pos):
            return NO_COLOR
        return int(self._colors[pos.y, pos.x])

    def first_colorable(self) -> Vec2 | None:
        """Top-left-most colourable peg in row-major order."""
        ys, xs = np.nonzero(self._colors >= 0)
        if len(ys) == 0:
            return None
        return Vec2(int(xs[0]), int(ys[0]))

    def __repr__(self) -> str:
        return f"ColorBoard({self.width}x{self.height}, colorable={self._colorable})"
