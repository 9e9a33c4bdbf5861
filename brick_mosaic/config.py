"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from brick_mosaic.color_utils import COLOR_SPACES
from brick_mosaic.ranking import RANKINGS

STRATEGIES = ("greedy", "exhaustive")


@dataclass(frozen=True)
class MosaicConfig:
    """All tuneable parameters for a mosaic run.

    Attributes:
        strategy:        "greedy" (default) or "exhaustive" (small boards only).
        ranking:         Greedy comparison - "rank" (cost per peg) or "score"
                         (fewer, larger bricks).
        workers:         Greedy worker threads per round (0 = all CPUs).
        seed_only:       Greedy starts from the top-left colourable peg only.
        color_space:     Matching metric - "rgb" (channel distance) or "lab".
        dither:          Apply 8x8 ordered (Bayer) dithering before matching.
        max_side:        Downscale so the longest side has this many pegs
                         (None = one peg per source pixel).
        tile_size:       Each peg becomes n x n pixels in the preview.
        save_board:      Persist the colour-matched board.
        save_progress:   Persist a preview after every greedy step / solution.
        save_comparison: Generate a side-by-side comparison grid.
        output_format:   Image format for saved files.
        input_dir:       Folder to scan for source images.
        output_dir:      Folder for results.
    """

    # Search
    strategy: str = "greedy"
    ranking: str = "rank"
    workers: int = 1
    seed_only: bool = False

    # Colour matching
    color_space: str = "rgb"
    dither: bool = False
    max_side: int | None = None

    # Output
    tile_size: int = 8
    save_board: bool = True
    save_progress: bool = False
    save_comparison: bool = True
    output_format: str = "png"

    # Paths
    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".png", ".bmp", ".gif", ".tiff", ".tif", ".webp"}
    )

    def __post_init__(self) -> None:
        if self.strategy not in STRATEGIES:
            raise ValueError(
                f"Unknown strategy {self.strategy!r}; expected one of {STRATEGIES}"
            )
        if self.ranking not in RANKINGS:
            raise ValueError(
                f"Unknown ranking {self.ranking!r}; expected one of {tuple(RANKINGS)}"
            )
        if self.color_space not in COLOR_SPACES:
            raise ValueError(
                f"Unknown color space {self.color_space!r}; expected one of {COLOR_SPACES}"
            )
        if self.max_side is not None and self.max_side < 1:
            raise ValueError(f"max_side must be >= 1, got {self.max_side}")
        if self.tile_size < 1:
            raise ValueError(f"tile_size must be >= 1, got {self.tile_size}")
