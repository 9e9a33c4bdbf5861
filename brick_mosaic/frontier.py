"""Frontier generation: where the next brick may be anchored."""

from __future__ import annotations

import numpy as np

from brick_mosaic.board import ColorBoard
from brick_mosaic.geometry import NEIGHBOUR_OFFSETS, Vec2, iter_board
from brick_mosaic.placement import PlacementSet


def get_next_positions(
    placement: PlacementSet,
    board: ColorBoard,
    only_append: bool = False,
    seed_only: bool = False,
) -> list[Vec2]:
    """Uncovered colourable pegs on the edge of growth, in row-major order.

    A peg qualifies when one of its four neighbours (up, down, left, right)
    is covered by a brick. Unless ``only_append`` is set, a neighbour that
    is off the board or colourless also qualifies it, which seeds the
    search along the outline of every colour region.

    Args:
        placement:   Current placement set.
        board:       Colour-indexed board.
        only_append: Only accept pegs touching placed bricks.
        seed_only:   On an empty placement set, return just the top-left
            colourable peg instead of scanning.

    Returns:
        Qualifying positions, each at most once.
    """
    if seed_only and placement.brick_count == 0:
        first = board.first_colorable()
        return [first] if first is not None else []

    occupancy = placement.occupancy
    colors = board.colors
    height, width = colors.shape
    positions: list[Vec2] = []

    for pos in iter_board(board.size):
        if occupancy[pos.y, pos.x] or colors[pos.y, pos.x] < 0:
            continue

        for offset in NEIGHBOUR_OFFSETS:
            nx, ny = pos.x + offset.x, pos.y + offset.y
            inside = 0 <= nx < width and 0 <= ny < height
            occupied = inside and bool(occupancy[ny, nx])

            if only_append:
                if occupied:
                    positions.append(pos)
                    break
            elif not inside or occupied or colors[ny, nx] < 0:
                positions.append(pos)
                break

    return positions


def is_solved(placement: PlacementSet, board: ColorBoard) -> bool:
    """True once at least one brick is placed and every colourable peg is covered."""
    if placement.brick_count == 0:
        return False
    uncovered = (board.colors >= 0) & ~placement.occupancy
    return not bool(np.any(uncovered))
