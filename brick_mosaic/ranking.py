"""Comparison strategies for choosing between candidate placement sets.

Both expose :meth:`Ranking.key`, where a lower key is a better candidate,
so the solvers stay agnostic of which strategy a run uses.
"""

from __future__ import annotations

from typing import Protocol

from brick_mosaic.placement import PlacementSet


class Ranking(Protocol):
    name: str

    def key(self, placement: PlacementSet) -> float: ...


class CostPerPegRanking:
    """Cost efficiency: cents per covered peg."""

    name = "rank"

    def key(self, placement: PlacementSet) -> float:
        return placement.rank()


class BrickScoreRanking:
    """Prefers fewer, larger bricks (negated so lower is better)."""

    name = "score"

    def key(self, placement: PlacementSet) -> float:
        return float(-placement.score())


RANKINGS: dict[str, type[CostPerPegRanking] | type[BrickScoreRanking]] = {
    CostPerPegRanking.name: CostPerPegRanking,
    BrickScoreRanking.name: BrickScoreRanking,
}


def get_ranking(name: str) -> Ranking:
    """Instantiate a ranking strategy by name (``"rank"`` or ``"score"``)."""
    try:
        return RANKINGS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown ranking {name!r}; choose from {sorted(RANKINGS)}"
        ) from None
