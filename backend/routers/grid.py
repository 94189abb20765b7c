"""Slice endpoints: /get-data (JSON grid) and /get-image (grayscale PNG).

Handlers are plain ``def`` so FastAPI runs them in its worker threadpool; the
shared dataset serializes the reads itself.
"""
from __future__ import annotations

from time import perf_counter
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse, Response

from response_headers import build_slice_headers
from slice_extract import extract_slice, parse_slice_request
from slice_render import render_png, to_grid


def build_grid_router(*, dataset, enable_image: bool, perf_record, logger):
    router = APIRouter()

    @router.get("/get-data")
    def get_data(
        t: Optional[str] = Query(None, description="Time index"),
        z: Optional[str] = Query(None, description="Depth index"),
    ):
        t0 = perf_counter()
        req = parse_slice_request(t, z)
        grid = extract_slice(dataset, req)
        payload = {"concentration_data": to_grid(grid)}
        perf_record("get-data", (perf_counter() - t0) * 1000.0)
        return JSONResponse(
            content=payload,
            headers=build_slice_headers(time_index=req.time_index, z_index=req.z_index, shape=grid.shape),
        )

    if enable_image:
        @router.get("/get-image")
        def get_image(
            t: Optional[str] = Query(None, description="Time index"),
            z: Optional[str] = Query(None, description="Depth index"),
        ):
            t0 = perf_counter()
            req = parse_slice_request(t, z)
            grid = extract_slice(dataset, req)
            png = render_png(grid)
            ms = (perf_counter() - t0) * 1000.0
            perf_record("get-image", ms)
            logger.debug(f"Rendered t={req.time_index} z={req.z_index} {len(png)}B in {ms:.1f}ms")
            return Response(
                content=png,
                media_type="image/png",
                headers=build_slice_headers(time_index=req.time_index, z_index=req.z_index, shape=grid.shape),
            )

    return router

