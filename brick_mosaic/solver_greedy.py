"""Greedy solver: commit the single best-ranked brick each round.

Hill-climbing without backtracking. Every round evaluates each frontier
position against every brick definition, anchored so the frontier peg can
sit at any corner of the brick, and keeps the placement whose resulting
set ranks best. Ties go to the candidate found first in scan order.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from brick_mosaic.board import ColorBoard
from brick_mosaic.catalog import BrickDefinition
from brick_mosaic.errors import UnsolvableError
from brick_mosaic.frontier import get_next_positions, is_solved
from brick_mosaic.geometry import Vec2, anchor_offsets
from brick_mosaic.placement import Brick, PlacementSet
from brick_mosaic.ranking import Ranking, get_ranking

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Candidate:
    key: float
    order: tuple[int, int]  # (frontier index, evaluation index within it)
    brick: Brick


class _BestCandidate:
    """Best candidate of a round, shared between worker threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.best: _Candidate | None = None

    def offer(self, candidate: _Candidate | None) -> None:
        if candidate is None:
            return
        with self._lock:
            best = self.best
            if best is None or (candidate.key, candidate.order) < (best.key, best.order):
                self.best = candidate


def _best_at_position(
    placement: PlacementSet,
    board: ColorBoard,
    definitions: Sequence[BrickDefinition],
    ranking: Ranking,
    position: Vec2,
    position_index: int,
) -> _Candidate | None:
    color_id = board.color_at(position)
    best: _Candidate | None = None
    evaluated = 0
    for definition in definitions:
        for offset in anchor_offsets(definition.shape):
            brick = Brick(definition.id, color_id, position + offset)
            trial = placement.copy()
            if trial.add_brick(brick, definitions, board):
                key = ranking.key(trial)
                if best is None or key < best.key:
                    best = _Candidate(key, (position_index, evaluated), brick)
            evaluated += 1
    return best


def _search_threaded(
    placement: PlacementSet,
    board: ColorBoard,
    definitions: Sequence[BrickDefinition],
    ranking: Ranking,
    positions: list[Vec2],
    slot: _BestCandidate,
    workers: int,
) -> None:
    errors: list[Exception] = []

    def _worker(index: int, position: Vec2) -> None:
        try:
            slot.offer(
                _best_at_position(placement, board, definitions, ranking, position, index)
            )
        except Exception as exc:  # re-raised on the calling thread
            errors.append(exc)

    for start in range(0, len(positions), workers):
        batch = [
            threading.Thread(
                target=_worker, args=(i, positions[i]), name=f"greedy-{i}", daemon=True,
            )
            for i in range(start, min(start + workers, len(positions)))
        ]
        for thread in batch:
            thread.start()
        for thread in batch:
            thread.join()
        if errors:
            raise errors[0]


def solve_greedy(
    board: ColorBoard,
    definitions: Sequence[BrickDefinition],
    ranking: str | Ranking = "rank",
    workers: int = 1,
    seed_only: bool = False,
    on_step: Callable[[PlacementSet], None] | None = None,
) -> PlacementSet:
    """Cover ``board`` one locally-best brick at a time.

    Args:
        board:       Colour-indexed board to cover.
        definitions: Brick definitions (rotations included), id == index.
        ranking:     ``"rank"``, ``"score"`` or a :class:`Ranking` instance.
        workers:     Threads per round; ``0`` uses every CPU.
        seed_only:   Start from the top-left colourable peg only.
        on_step:     Called with the live set after every committed brick.

    Returns:
        A solved :class:`PlacementSet`.

    Raises:
        UnsolvableError: If a round finds no legal placement.
    """
    if isinstance(ranking, str):
        ranking = get_ranking(ranking)
    if workers <= 0:
        workers = os.cpu_count() or 1

    live = PlacementSet(board.size)
    total = board.colorable_count
    t0 = time.perf_counter()

    logger.info(
        "Greedy start | board=%dx%d  pegs=%d  definitions=%d  ranking=%s  workers=%d",
        board.width, board.height, total, len(definitions), ranking.name, workers,
    )

    while not is_solved(live, board):
        positions = get_next_positions(live, board, seed_only=seed_only)
        slot = _BestCandidate()

        if workers > 1 and len(positions) > 1:
            _search_threaded(live, board, definitions, ranking, positions, slot, workers)
        else:
            for index, position in enumerate(positions):
                slot.offer(
                    _best_at_position(live, board, definitions, ranking, position, index)
                )

        best = slot.best
        if best is None:
            raise UnsolvableError(
                "Unable to place a brick into an unsolved set "
                f"({live.peg_count}/{total} pegs covered, {live.brick_count} bricks)"
            )

        logger.debug(
            "Round %d: %d frontier positions, best key=%.4f at %s",
            live.brick_count + 1, len(positions), best.key, best.brick.position,
        )

        if not live.add_brick(best.brick, definitions, board):
            raise RuntimeError(f"Chosen brick {best.brick} no longer fits the live set")

        logger.info(
            "Progress: %.2f%% at search depth %d",
            live.fill_ratio(board) * 100.0, live.brick_count,
        )
        if on_step is not None:
            on_step(live)

    logger.info(
        "Greedy done  | bricks=%d  cost=%d  (%.1f s)",
        live.brick_count, live.cost, time.perf_counter() - t0,
    )
    return live
