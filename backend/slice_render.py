"""Render an extracted slice as a coordinate-tagged grid or a grayscale PNG."""

from __future__ import annotations

import io
import math
from typing import Any, Dict, List

import numpy as np
from PIL import Image

from constants import GRAY_CONSTANT_FIELD, GRAY_MAX
from errors import EmptySlice
from slice_extract import GridSlice


def _json_float(v: float):
    return v if math.isfinite(v) else None


def to_grid(grid: GridSlice) -> List[List[Dict[str, Any]]]:
    """Rows follow y order, columns follow x order; non-finite values become None."""
    xs = grid.x_coords.tolist()
    ys = grid.y_coords.tolist()
    vals = grid.values.tolist()
    row_size = len(xs)
    rows = []
    for r, y in enumerate(ys):
        base = r * row_size
        yv = _json_float(y)
        rows.append([
            {"x": _json_float(x), "y": yv, "concentration": _json_float(vals[base + c])}
            for c, x in enumerate(xs)
        ])
    return rows


def to_grayscale(grid: GridSlice) -> np.ndarray:
    """Linearly map the slice onto 0..255, returning a (col_size, row_size) uint8 array.

    A slice with zero value range (or no finite values) maps every cell to
    GRAY_CONSTANT_FIELD. Non-finite cells map to 0.
    """
    if grid.values.size == 0:
        raise EmptySlice()

    vals = grid.values_2d()
    finite = np.isfinite(vals)
    if not finite.any():
        return np.full(vals.shape, GRAY_CONSTANT_FIELD, dtype=np.uint8)

    vmin = float(vals[finite].min())
    vmax = float(vals[finite].max())
    if vmax == vmin:
        return np.full(vals.shape, GRAY_CONSTANT_FIELD, dtype=np.uint8)

    scaled = np.zeros(vals.shape, dtype=np.float64)
    rng = vmax - vmin
    if math.isfinite(rng):
        scaled[finite] = np.floor(GRAY_MAX * (vals[finite] - vmin) / rng)
    else:
        # Span overflows float64; halve both ends so the ratio stays finite
        half = vals[finite] / 2.0 - vmin / 2.0
        scaled[finite] = np.floor(GRAY_MAX * (half / (vmax / 2.0 - vmin / 2.0)))
    # Rounding can leave the extremes one step short
    scaled[finite & (vals == vmin)] = 0
    scaled[finite & (vals == vmax)] = GRAY_MAX
    return np.clip(scaled, 0, GRAY_MAX).astype(np.uint8)


def encode_png(pixels: np.ndarray) -> bytes:
    """Encode a 2-D uint8 array as an 8-bit grayscale PNG (stride = width, no padding)."""
    img = Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
    b = io.BytesIO()
    img.save(b, format="PNG")
    return b.getvalue()


def render_png(grid: GridSlice) -> bytes:
    return encode_png(to_grayscale(grid))
