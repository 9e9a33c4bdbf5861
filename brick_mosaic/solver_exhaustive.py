"""Exhaustive breadth-first solver.

Enumerates every legal continuation of every partial placement, records
each set that covers the board, and returns the cheapest. The search space
grows exponentially with the number of pegs, so this is only practical for
small boards or for checking the greedy solver on toy inputs.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Callable, Sequence

from brick_mosaic.board import ColorBoard
from brick_mosaic.catalog import BrickDefinition
from brick_mosaic.errors import UnsolvableError
from brick_mosaic.frontier import get_next_positions, is_solved
from brick_mosaic.placement import Brick, PlacementSet

logger = logging.getLogger(__name__)


def solve_exhaustive(
    board: ColorBoard,
    definitions: Sequence[BrickDefinition],
    on_solution: Callable[[PlacementSet, int], None] | None = None,
) -> PlacementSet:
    """Return the cheapest full covering reachable by breadth-first growth.

    The first expansion seeds from region outlines; every later expansion
    only grows pegs adjacent to placed bricks. Bricks are anchored at the
    frontier peg. Among equally cheap solutions the first discovered wins.

    Args:
        board:       Colour-indexed board to cover.
        definitions: Brick definitions (rotations included), id == index.
        on_solution: Called with each solution and the search step count.

    Raises:
        UnsolvableError: If no covering was found.
    """
    queue: deque[PlacementSet] = deque([PlacementSet(board.size)])
    solutions: list[PlacementSet] = []
    total = board.colorable_count
    expanded = 0
    steps = 0
    t0 = time.perf_counter()

    logger.info(
        "Exhaustive start | board=%dx%d  pegs=%d  definitions=%d",
        board.width, board.height, total, len(definitions),
    )

    while queue:
        current = queue.popleft()
        positions = get_next_positions(current, board, only_append=expanded > 0)
        expanded += 1

        for position in positions:
            color_id = board.color_at(position)
            for definition in definitions:
                trial = current.copy()
                steps += 1
                if not trial.add_brick(
                    Brick(definition.id, color_id, position), definitions, board,
                ):
                    continue

                if is_solved(trial, board):
                    solutions.append(trial)
                    logger.info(
                        "Found a solution; brick-count: %d, cost: $%d.%02d (step %d)",
                        trial.brick_count, trial.cost // 100, trial.cost % 100, steps,
                    )
                    if on_solution is not None:
                        on_solution(trial, steps)
                else:
                    queue.append(trial)

        if expanded % 1000 == 0:
            logger.debug(
                "Expanded %d sets, queue=%d, solutions=%d, steps=%d",
                expanded, len(queue), len(solutions), steps,
            )

    logger.info(
        "Exhaustive done | expanded=%d  steps=%d  solutions=%d  (%.1f s)",
        expanded, steps, len(solutions), time.perf_counter() - t0,
    )

    if not solutions:
        raise UnsolvableError(
            f"No complete covering found after {steps} search steps"
        )

    # min() keeps the first of equally cheap solutions
    return min(solutions, key=lambda s: s.cost)
