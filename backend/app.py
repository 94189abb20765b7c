#!/usr/bin/env python3
"""gridslice FastAPI backend — serves (time, z) slices of one gridded NetCDF file as JSON or PNG."""

import os
import sys
import time
import uuid
import argparse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Add backend dir to path so flat module imports work when run as a script
sys.path.insert(0, os.path.dirname(__file__))
from constants import DIM_TIME, DIM_X, DIM_Y, DIM_Z, ENABLE_IMAGE_ROUTE, LOG_DIR, LOG_LEVEL, SERVER_HOST, SERVER_PORT
from errors import FileFormatError, SliceError
from logging_config import setup_logging
from routers.core import build_core_router
from routers.grid import build_grid_router
from services.dataset_access import GriddedDataset, dimension_summary
from status_ops import build_status_payload, count_response, perf_record

logger = setup_logging("gridslice", level=LOG_LEVEL, log_dir=LOG_DIR)

# Polling endpoints are only logged when they fail
QUIET_PATHS = ("/api/health", "/api/status")


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or uuid.uuid4().hex[:12]


def _error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    rid = _request_id(request)
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "requestId": rid},
        headers={"X-Request-Id": rid},
    )


def create_app(dataset: GriddedDataset, *, enable_image: bool = ENABLE_IMAGE_ROUTE) -> FastAPI:
    started_at = datetime.now(timezone.utc)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("gridslice API server starting")
        logger.info(f"Dataset: {dataset.path}")
        logger.info(f"Dimensions: {dimension_summary(dataset.list_dimensions(), [DIM_TIME, DIM_Z, DIM_Y, DIM_X])}")
        logger.info(f"Image route: {'enabled' if enable_image else 'disabled'}")
        yield
        dataset.close()
        logger.info("Dataset closed")

    app = FastAPI(title="gridslice API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(SliceError)
    async def slice_error_handler(request: Request, exc: SliceError):
        if exc.status_code >= 500:
            logger.error(f"{request.url.path} failed rid={_request_id(request)}: {exc.message}")
        return _error_response(request, exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(request, exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error_response(request, 400, "Invalid request parameters")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error rid={_request_id(request)}: {exc}")
        return _error_response(request, 500, "Internal server error")

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log requests with method, path, status and response time."""
        start_time = time.time()
        request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex[:12]
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception:
            count_response(500)
            raise

        duration_ms = (time.time() - start_time) * 1000
        response.headers["X-Request-Id"] = request_id
        count_response(response.status_code)

        if request.url.path not in QUIET_PATHS or response.status_code >= 400:
            logger.info(
                f"{request.method} {request.url.path} - {response.status_code} - {duration_ms:.2f}ms - rid={request_id}"
            )

        return response

    app.include_router(build_core_router(
        dataset=dataset,
        enable_image=enable_image,
        build_status_payload=build_status_payload,
        started_at=started_at,
    ))
    app.include_router(build_grid_router(
        dataset=dataset,
        enable_image=enable_image,
        perf_record=perf_record,
        logger=logger,
    ))
    return app


class _UsageParser(argparse.ArgumentParser):
    """Argument errors print usage to stdout and exit with status 1."""

    def error(self, message):
        self.print_usage(sys.stdout)
        print(f"{self.prog}: error: {message}")
        self.exit(1)


def main(argv: Optional[List[str]] = None) -> int:
    ap = _UsageParser(prog="gridslice", description="Serve slices of a gridded NetCDF file over HTTP.")
    ap.add_argument("path", help="Path to the NetCDF file (dimensions time, z, y, x)")
    args = ap.parse_args(argv)

    try:
        dataset = GriddedDataset.open(args.path)
    except FileFormatError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    import uvicorn
    uvicorn.run(create_app(dataset), host=SERVER_HOST, port=SERVER_PORT)
    return 0


if __name__ == "__main__":
    sys.exit(main())
