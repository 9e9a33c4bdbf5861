"""Ordered (Bayer) dithering.

Applied to the colours picked by the first palette match: each channel is
darkened by a position-dependent threshold taken from an 8x8 Bayer matrix,
then the result is matched against the palette again. Neighbouring pixels
of the same flat colour therefore alternate between nearby palette
entries, which breaks up large single-colour areas.
"""

from __future__ import annotations

import numpy as np

DITHER_DIVISOR = 128.0

# 8x8 Bayer ordering, indexed as BAYER_8X8[x % 8][y % 8]
BAYER_8X8 = np.array(
    [
        [1, 49, 13, 61, 4, 52, 16, 64],
        [33, 17, 45, 29, 36, 20, 48, 32],
        [9, 57, 5, 53, 12, 60, 8, 56],
        [41, 25, 37, 21, 44, 28, 40, 24],
        [3, 51, 15, 63, 2, 50, 14, 62],
        [35, 19, 47, 31, 34, 18, 46, 30],
        [11, 59, 7, 55, 10, 58, 6, 54],
        [43, 27, 39, 23, 42, 26, 38, 22],
    ],
    dtype=np.float64,
) / DITHER_DIVISOR


def apply_ordered_dither(
    colors: np.ndarray,
    xs: np.ndarray,
    ys: np.ndarray,
) -> np.ndarray:
    """Darken each colour by the Bayer threshold of its position.

    Every channel ``c`` becomes ``int((c/255 - c/255 * t) * 255)``.

    Args:
        colors: (N, 3) uint8 RGB.
        xs:     (N,) column of each colour.
        ys:     (N,) row of each colour.

    Returns:
        (N, 3) uint8 - the perturbed colours.
    """
    thresholds = BAYER_8X8[np.asarray(xs) % 8, np.asarray(ys) % 8]
    unit = colors.astype(np.float64) / 255.0
    unit = unit - unit * thresholds[:, np.newaxis]
    return np.clip((unit * 255.0).astype(np.int64), 0, 255).astype(np.uint8)
