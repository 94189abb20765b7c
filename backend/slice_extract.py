"""Validate (time, z) requests and pull one 2-D slice out of the dataset."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from constants import DIM_TIME, DIM_X, DIM_Y, DIM_Z, REQUIRED_VARIABLES, VAR_FIELD, VAR_X, VAR_Y
from errors import InvalidParameter, MissingVariable, OutOfBounds

logger = logging.getLogger("gridslice.extract")


@dataclass(frozen=True)
class SliceRequest:
    time_index: int
    z_index: int


@dataclass(frozen=True)
class GridSlice:
    """One (y, x) slice; ``values[row * row_size + col]`` sits at ``(x_coords[col], y_coords[row])``."""

    x_coords: np.ndarray
    y_coords: np.ndarray
    values: np.ndarray

    @property
    def row_size(self) -> int:
        return int(self.x_coords.size)

    @property
    def col_size(self) -> int:
        return int(self.y_coords.size)

    @property
    def shape(self) -> tuple[int, int]:
        return self.col_size, self.row_size

    def values_2d(self) -> np.ndarray:
        return self.values.reshape(self.shape)


def _parse_index(param: str, raw) -> int:
    if raw is None:
        raise InvalidParameter(param, "missing")
    if isinstance(raw, bool):
        raise InvalidParameter(param)
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        if not (text.isascii() and text.isdigit()):
            raise InvalidParameter(param)
        value = int(text)
    if value < 0:
        raise InvalidParameter(param)
    return value


def parse_slice_request(t: Optional[str], z: Optional[str]) -> SliceRequest:
    """Parse raw query values; ``t`` is checked before ``z``."""
    return SliceRequest(time_index=_parse_index("t", t), z_index=_parse_index("z", z))


def validate_request(dataset, request: SliceRequest) -> None:
    n_time = dataset.dimension_size(DIM_TIME)
    if request.time_index >= n_time:
        raise OutOfBounds("t", request.time_index, n_time)
    n_z = dataset.dimension_size(DIM_Z)
    if request.z_index >= n_z:
        raise OutOfBounds("z", request.z_index, n_z)
    for name in REQUIRED_VARIABLES:
        if not dataset.has_variable(name):
            raise MissingVariable(name)


def extract_slice(dataset, request: SliceRequest) -> GridSlice:
    validate_request(dataset, request)

    row_size = dataset.dimension_size(DIM_X)
    col_size = dataset.dimension_size(DIM_Y)

    x_coords = dataset.read_variable_1d(VAR_X, row_size)
    y_coords = dataset.read_variable_1d(VAR_Y, col_size)
    if row_size == 0 or col_size == 0:
        values = np.empty(0, dtype=np.float64)
    else:
        values = dataset.read_slice_4d(
            VAR_FIELD,
            start=[request.time_index, request.z_index, 0, 0],
            count=[1, 1, col_size, row_size],
        )

    logger.debug(
        f"Extracted t={request.time_index} z={request.z_index} shape={col_size}x{row_size}"
    )
    return GridSlice(x_coords=x_coords, y_coords=y_coords, values=values)
