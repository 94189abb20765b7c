"""Shared HTTP response header builders for slice endpoints."""

from __future__ import annotations


def build_slice_headers(*, time_index: int, z_index: int, shape: tuple[int, int]) -> dict:
    return {
        "Cache-Control": "no-store",
        "X-Time-Index": str(time_index),
        "X-Z-Index": str(z_index),
        "X-Grid-Shape": f"{shape[0]}x{shape[1]}",
        "Access-Control-Expose-Headers": "X-Time-Index, X-Z-Index, X-Grid-Shape",
    }
