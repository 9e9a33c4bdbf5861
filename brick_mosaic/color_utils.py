"""Colour-space conversion and nearest-palette matching."""

from __future__ import annotations

import numpy as np
from scipy.spatial.distance import cdist
from skimage.color import rgb2lab

from brick_mosaic.dithering import apply_ordered_dither

NO_COLOR = -1

COLOR_SPACES = ("rgb", "lab")


def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert flat (N, 3) uint8 RGB → (N, 3) float64 CIELAB."""
    return rgb2lab(rgb.astype(np.float64).reshape(1, -1, 3) / 255.0).reshape(-1, 3)


def compute_distance_matrix(
    pixels: np.ndarray,
    palette: np.ndarray,
    color_space: str = "rgb",
) -> np.ndarray:
    """Distance from every pixel to every palette colour.

    Args:
        pixels:  (N, 3) uint8 RGB.
        palette: (K, 3) uint8 RGB.
        color_space: ``"rgb"`` sums the absolute per-channel differences,
            ``"lab"`` uses Euclidean distance in CIELAB.

    Returns:
        (N, K) float64 distance matrix.
    """
    if color_space == "lab":
        return cdist(rgb_to_lab(pixels), rgb_to_lab(palette), metric="euclidean")
    if color_space == "rgb":
        return cdist(
            pixels.astype(np.float64), palette.astype(np.float64), metric="cityblock",
        )
    raise ValueError(f"Unknown colour space {color_space!r}; expected one of {COLOR_SPACES}")


def nearest_palette_index(
    pixels: np.ndarray,
    palette: np.ndarray,
    color_space: str = "rgb",
) -> np.ndarray:
    """Index of the closest palette colour for each (N, 3) pixel.

    Ties resolve to the lowest palette index.
    """
    if len(pixels) == 0:
        return np.zeros(0, dtype=np.int32)
    dist = compute_distance_matrix(pixels, palette, color_space)
    return np.argmin(dist, axis=1).astype(np.int32)


def match_colors(
    rgba: np.ndarray,
    palette: np.ndarray,
    color_space: str = "rgb",
    dither: bool = False,
) -> np.ndarray:
    """Resolve an RGBA image to palette indices.

    Pixels that are not fully opaque map to :data:`NO_COLOR`. With
    ``dither`` the matched colours are passed through the ordered Bayer
    threshold and matched a second time.

    Args:
        rgba:    (H, W, 4) uint8.
        palette: (K, 3) uint8 RGB.

    Returns:
        (H, W) int32 array of palette indices or ``NO_COLOR``.
    """
    h, w = rgba.shape[:2]
    indices = np.full((h, w), NO_COLOR, dtype=np.int32)
    if len(palette) == 0:
        return indices

    opaque = rgba[..., 3] == 255
    matched = nearest_palette_index(rgba[opaque][:, :3], palette, color_space)

    if dither:
        ys, xs = np.nonzero(opaque)
        dithered = apply_ordered_dither(palette[matched], xs, ys)
        matched = nearest_palette_index(dithered, palette, color_space)

    indices[opaque] = matched
    return indices
