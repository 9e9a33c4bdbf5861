"""
Brick Mosaic Planner
====================

Turn an image into a build plan of rectangular bricks drawn from a fixed
catalog of colours, shapes and prices: every opaque pixel is covered by
exactly one brick of matching colour, while keeping the total cost low.
Ships two solvers:

- **Greedy** (default, one best brick per round, optionally threaded)
- **Exhaustive** (breadth-first enumeration, small boards only)
"""

__version__ = "1.0.0"

from brick_mosaic.board import ColorBoard
from brick_mosaic.catalog import (
    BrickCatalog,
    BrickDefinition,
    default_catalog,
    load_catalog,
    parse_catalog,
    with_rotations,
)
from brick_mosaic.config import MosaicConfig
from brick_mosaic.errors import CatalogError, ImageLoadError, MosaicError, UnsolvableError
from brick_mosaic.frontier import get_next_positions, is_solved
from brick_mosaic.geometry import Vec2
from brick_mosaic.image_io import load_image, render_board, render_placement
from brick_mosaic.placement import Brick, PlacementSet
from brick_mosaic.report import build_parts_list, format_parts_list
from brick_mosaic.solver_exhaustive import solve_exhaustive
from brick_mosaic.solver_greedy import solve_greedy

__all__ = [
    "Brick",
    "BrickCatalog",
    "BrickDefinition",
    "CatalogError",
    "ColorBoard",
    "ImageLoadError",
    "MosaicConfig",
    "MosaicError",
    "PlacementSet",
    "UnsolvableError",
    "Vec2",
    "build_parts_list",
    "default_catalog",
    "format_parts_list",
    "get_next_positions",
    "is_solved",
    "load_catalog",
    "load_image",
    "parse_catalog",
    "render_board",
    "render_placement",
    "solve_exhaustive",
    "solve_greedy",
    "with_rotations",
]
