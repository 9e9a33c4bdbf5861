"""Parts list: how many of each brick, per colour, and what it all costs."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from brick_mosaic.catalog import BrickCatalog
from brick_mosaic.placement import PlacementSet


@dataclass(frozen=True)
class PartsList:
    """Aggregated purchase order for a finished placement set.

    Attributes:
        counts:      (colours, definitions) int array of bricks needed.
        brick_count: Total bricks placed.
        total_cost:  Total cost in cents.
    """

    counts: np.ndarray
    brick_count: int
    total_cost: int

    def color_total(self, color_id: int) -> int:
        return int(self.counts[color_id].sum())

    def entries(self, color_id: int) -> list[tuple[int, int]]:
        """``(definition_id, count)`` pairs with a non-zero count."""
        row = self.counts[color_id]
        return [(int(d), int(row[d])) for d in np.flatnonzero(row)]


def format_cents(cents: int) -> str:
    """``1234`` → ``"$12.34"``."""
    return f"${cents // 100}.{cents % 100:02d}"


def build_parts_list(placement: PlacementSet, catalog: BrickCatalog) -> PartsList:
    counts = np.zeros((len(catalog.colors), len(catalog.definitions)), dtype=np.int64)
    for brick in placement.bricks:
        counts[brick.color_id, brick.definition_id] += 1
    return PartsList(
        counts=counts,
        brick_count=placement.brick_count,
        total_cost=placement.cost,
    )


def format_parts_list(parts: PartsList, catalog: BrickCatalog) -> list[str]:
    """Plain-text report, colour by colour, followed by the totals."""
    lines: list[str] = []
    for color_id, name in enumerate(catalog.color_names):
        total = parts.color_total(color_id)
        if total <= 0:
            lines.append(f'Color "{name}" is unused')
            continue

        lines.append(f'Color "{name}" has {total} parts:')
        for definition_id, count in parts.entries(color_id):
            definition = catalog.definitions[definition_id]
            lines.append(
                f"\t{count} needed for part #{definition_id} "
                f"( {definition.width} x {definition.height}, "
                f"{definition.cost} cents per unit )"
            )

    lines.append(f"> Total bricks: {parts.brick_count}")
    lines.append(f"> Total cost: {format_cents(parts.total_cost)}")
    return lines
