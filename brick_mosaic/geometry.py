"""Integer grid coordinates and the iteration helpers built on them."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec2:
    """Integer pair used both as a board position and as a size."""

    x: int
    y: int

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    @property
    def area(self) -> int:
        return self.x * self.y


# Up, down, left, right
NEIGHBOUR_OFFSETS: tuple[Vec2, ...] = (
    Vec2(0, -1),
    Vec2(0, 1),
    Vec2(-1, 0),
    Vec2(1, 0),
)


def in_bounds(pos: Vec2, size: Vec2) -> bool:
    return 0 <= pos.x < size.x and 0 <= pos.y < size.y


def iter_board(size: Vec2) -> Iterator[Vec2]:
    """Yield every cell of a ``size`` board in row-major order."""
    for y in range(size.y):
        for x in range(size.x):
            yield Vec2(x, y)


def anchor_offsets(shape: Vec2) -> list[Vec2]:
    """Offsets that put a given cell at each corner of a ``shape`` footprint.

    Duplicates are dropped while keeping order, so a 1x1 shape yields a
    single zero offset and a 1xN shape yields two.
    """
    candidates = (
        Vec2(0, 0),
        Vec2(1 - shape.x, 0),
        Vec2(0, 1 - shape.y),
        Vec2(1 - shape.x, 1 - shape.y),
    )
    offsets: list[Vec2] = []
    for offset in candidates:
        if offset not in offsets:
            offsets.append(offset)
    return offsets
