"""Image loading, preview rendering, saving and comparison grids."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from brick_mosaic.board import ColorBoard
from brick_mosaic.catalog import BrickCatalog
from brick_mosaic.errors import ImageLoadError
from brick_mosaic.placement import PlacementSet

EDGE_HIGHLIGHT = 25


def compute_target_size(
    original_width: int,
    original_height: int,
    max_side: int,
) -> tuple[int, int]:
    """Compute downscaled (w, h) preserving aspect ratio.

    The longest side becomes *max_side*; the other is scaled
    proportionally (rounded to the nearest integer, minimum 1).
    """
    if original_width >= original_height:
        w = max_side
        h = max(1, round(original_height * max_side / original_width))
    else:
        h = max_side
        w = max(1, round(original_width * max_side / original_height))
    return w, h


def load_image(path: str | Path | BinaryIO, max_side: int | None = None) -> np.ndarray:
    """Load an image (file path or binary stream) as RGBA, optionally
    shrinking it so one pixel is one peg.

    Nearest-neighbour resampling keeps alpha binary, so transparent areas
    stay transparent.

    Returns:
        (H, W, 4) uint8 array.

    Raises:
        ImageLoadError: If the source is missing or not a decodable image.
    """
    try:
        with Image.open(path) as src:
            img = src.convert("RGBA")
    except OSError as exc:
        raise ImageLoadError(f'Unable to load the given file "{path}": {exc}') from exc

    if max_side is not None and max(img.width, img.height) > max_side:
        w, h = compute_target_size(img.width, img.height, max_side)
        img = img.resize((w, h), Image.NEAREST)
    return np.array(img, dtype=np.uint8)


def render_board(board: ColorBoard, catalog: BrickCatalog) -> np.ndarray:
    """Colour-matched board, one pixel per peg; colourless pegs are transparent.

    Returns:
        (H, W, 4) uint8 array.
    """
    out = np.zeros((board.height, board.width, 4), dtype=np.uint8)
    mask = board.colors >= 0
    if len(catalog.colors):
        out[mask, :3] = catalog.rgb[board.colors[mask]]
        out[mask, 3] = 255
    return out


def render_placement(
    placement: PlacementSet,
    catalog: BrickCatalog,
    tile_size: int = 8,
) -> np.ndarray:
    """Draw every placed brick as ``tile_size`` pixels per peg.

    Brick outlines are drawn one pixel wide in the brick colour lightened
    by :data:`EDGE_HIGHLIGHT` per channel. Uncovered pegs stay transparent.

    Returns:
        (H * tile_size, W * tile_size, 4) uint8 array.
    """
    size = placement.board_size
    out = np.zeros((size.y * tile_size, size.x * tile_size, 4), dtype=np.uint8)
    rgb = catalog.rgb

    for brick in placement.bricks:
        definition = catalog.definitions[brick.definition_id]
        fill = rgb[brick.color_id].astype(np.int32)
        edge = np.minimum(fill + EDGE_HIGHLIGHT, 255)

        x0 = brick.position.x * tile_size
        y0 = brick.position.y * tile_size
        x1 = x0 + definition.width * tile_size
        y1 = y0 + definition.height * tile_size

        block = out[y0:y1, x0:x1]
        block[..., :3] = fill
        block[0, :, :3] = edge
        block[-1, :, :3] = edge
        block[:, 0, :3] = edge
        block[:, -1, :3] = edge
        block[..., 3] = 255
    return out


def save_upscaled(
    array: np.ndarray,
    path: str | Path,
    pixel_upscale: int = 1,
) -> None:
    """Save an RGB(A) array, nearest-neighbour upscaled by *pixel_upscale*."""
    img = Image.fromarray(array.astype(np.uint8))
    if pixel_upscale != 1:
        h, w = array.shape[:2]
        img = img.resize((w * pixel_upscale, h * pixel_upscale), Image.NEAREST)
    img.save(path)


def make_comparison_grid(
    source: np.ndarray,
    board_img: np.ndarray,
    mosaic: np.ndarray,
    output_path: str | Path,
    tile_size: int = 8,
) -> None:
    """Create a 3-panel comparison: Source | Matched | Bricks.

    *source* and *board_img* are one pixel per peg and get upscaled by
    *tile_size*; *mosaic* is already rendered at that scale.
    """
    h, w = board_img.shape[:2]
    panel_w = w * tile_size
    panel_h = h * tile_size
    label_height = 36

    panels = [
        Image.fromarray(source).resize((panel_w, panel_h), Image.NEAREST),
        Image.fromarray(board_img).resize((panel_w, panel_h), Image.NEAREST),
        Image.fromarray(mosaic).resize((panel_w, panel_h), Image.NEAREST),
    ]
    labels = ["Source", f"Matched {w}x{h}", "Bricks"]

    gap = 8
    total_w = len(panels) * panel_w + (len(panels) - 1) * gap
    total_h = panel_h + label_height

    canvas = Image.new("RGBA", (total_w, total_h), (30, 30, 30, 255))
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 18,
        )
    except OSError:
        font = ImageFont.load_default()

    for i, (panel, label) in enumerate(zip(panels, labels, strict=True)):
        x = i * (panel_w + gap)
        canvas.alpha_composite(panel.convert("RGBA"), (x, label_height))

        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        tx = x + (panel_w - text_w) // 2
        draw.text((tx, 6), label, fill=(220, 220, 220), font=font)

    canvas.save(output_path)
