"""Placed bricks and the placement set the solvers grow and branch."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from brick_mosaic.board import ColorBoard
from brick_mosaic.catalog import BrickDefinition
from brick_mosaic.geometry import Vec2

SCORE_BASE = 100_000


@dataclass(frozen=True)
class Brick:
    """A brick definition of a given colour anchored at its top-left peg."""

    definition_id: int
    color_id: int
    position: Vec2


def _resolve(definitions: Sequence[BrickDefinition], definition_id: int) -> BrickDefinition | None:
    if 0 <= definition_id < len(definitions):
        return definitions[definition_id]
    return None


class PlacementSet:
    """One (possibly partial) assignment of bricks to a board.

    Tracks a boolean occupancy map along with the running cost and
    covered-peg count so that neither needs recomputing while searching.
    :meth:`add_brick` is the only mutator; branches are made with
    :meth:`copy`.
    """

    def __init__(self, board_size: Vec2) -> None:
        self._size = board_size
        self._occupancy = np.zeros((board_size.y, board_size.x), dtype=bool)
        self._bricks: list[Brick] = []
        self._cost = 0
        self._peg_count = 0

    def copy(self) -> PlacementSet:
        """Independent clone: own occupancy map and brick list."""
        clone = PlacementSet.__new__(PlacementSet)
        clone._size = self._size
        clone._occupancy = self._occupancy.copy()
        clone._bricks = list(self._bricks)
        clone._cost = self._cost
        clone._peg_count = self._peg_count
        return clone

    # -- State -------------------------------------------------------------

    @property
    def board_size(self) -> Vec2:
        return self._size

    @property
    def bricks(self) -> tuple[Brick, ...]:
        """Placed bricks in placement order."""
        return tuple(self._bricks)

    @property
    def brick_count(self) -> int:
        return len(self._bricks)

    @property
    def cost(self) -> int:
        """Total cost in cents."""
        return self._cost

    @property
    def peg_count(self) -> int:
        """Number of pegs covered by placed bricks."""
        return self._peg_count

    @property
    def occupancy(self) -> np.ndarray:
        """Read-only (H, W) view of the occupancy map."""
        view = self._occupancy.view()
        view.flags.writeable = False
        return view

    def is_peg_occupied(self, pos: Vec2) -> bool:
        """Whether a brick covers ``pos``. No bounds checking."""
        return bool(self._occupancy[pos.y, pos.x])

    # -- Mutation ----------------------------------------------------------

    def add_brick(
        self,
        brick: Brick,
        definitions: Sequence[BrickDefinition],
        board: ColorBoard,
    ) -> bool:
        """Place ``brick`` if it is legal; return whether it was placed.

        A placement is rejected when the definition is unknown, the
        footprint leaves the board, the colour is :data:`NO_COLOR`, or any
        footprint peg is already covered or has a different board colour.
        A rejected placement leaves the set untouched.
        """
        definition = _resolve(definitions, brick.definition_id)
        if definition is None:
            return False

        x, y = brick.position.x, brick.position.y
        w, h = definition.width, definition.height
        if x < 0 or y < 0 or x + w > self._size.x or y + h > self._size.y:
            return False

        if brick.color_id < 0:
            return False

        footprint = (slice(y, y + h), slice(x, x + w))
        if self._occupancy[footprint].any():
            return False
        if not np.all(board.colors[footprint] == brick.color_id):
            return False

        self._bricks.append(brick)
        self._occupancy[footprint] = True
        self._cost += definition.cost
        self._peg_count += definition.area
        return True

    # -- Metrics -----------------------------------------------------------

    def rank(self) -> float:
        """Cost per covered peg; lower is better."""
        if self._peg_count == 0:
            return math.inf
        return self._cost / self._peg_count

    def score(self) -> int:
        """Favours fewer, larger bricks; higher is better."""
        return SCORE_BASE - len(self._bricks) + self._peg_count * 10

    def fill_ratio(self, board: ColorBoard) -> float:
        """Covered pegs over colourable pegs on ``board``."""
        if board.colorable_count == 0:
            return 0.0
        return self._peg_count / board.colorable_count

    def recompute_totals(self, definitions: Sequence[BrickDefinition]) -> tuple[int, int]:
        """Cost and peg count summed afresh from the brick list."""
        cost = 0
        pegs = 0
        for brick in self._bricks:
            definition = definitions[brick.definition_id]
            cost += definition.cost
            pegs += definition.area
        return cost, pegs

    def __repr__(self) -> str:
        return (
            f"PlacementSet({self._size.x}x{self._size.y}, bricks={len(self._bricks)}, "
            f"cost={self._cost}, pegs={self._peg_count})"
        )
