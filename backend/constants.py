"""Shared constants for the gridslice backend.

Dataset layout names and the few environment-overridable server settings live here.
"""

from __future__ import annotations
import os

# Expected dataset layout
DIM_TIME: str = "time"
DIM_Z: str = "z"
DIM_Y: str = "y"
DIM_X: str = "x"
VAR_X: str = "x"
VAR_Y: str = "y"
VAR_FIELD: str = "concentration"
REQUIRED_VARIABLES: tuple[str, ...] = (VAR_X, VAR_Y, VAR_FIELD)

# Server
SERVER_HOST: str = os.environ.get('GRIDSLICE_HOST', '0.0.0.0')
SERVER_PORT: int = int(os.environ.get('GRIDSLICE_PORT', '18080'))
LOG_LEVEL: str = os.environ.get('GRIDSLICE_LOG_LEVEL', 'INFO')
LOG_DIR: str | None = os.environ.get('GRIDSLICE_LOG_DIR') or None
ENABLE_IMAGE_ROUTE: bool = os.environ.get('GRIDSLICE_ENABLE_IMAGE', '1').lower() not in ('0', 'false', 'no', 'off')

# Grayscale normalization
GRAY_MAX: int = 255
# Pixel value used for every cell when a slice has zero value range
GRAY_CONSTANT_FIELD: int = 0

# Recent render timings kept for /api/status
PERF_RECENT_MAX_ITEMS: int = 400

# numpy dtype.str (without byte order) -> NetCDF CDL type name
NC_TYPE_NAMES: dict[str, str] = {
    "i1": "byte",
    "u1": "ubyte",
    "S1": "char",
    "i2": "short",
    "u2": "ushort",
    "i4": "int",
    "u4": "uint",
    "i8": "int64",
    "u8": "uint64",
    "f4": "float",
    "f8": "double",
}
