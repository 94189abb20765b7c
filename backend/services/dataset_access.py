"""Read-only access to the single gridded NetCDF file served by the backend.

The handle is opened once at startup and shared by every request. netCDF-C is
not thread-safe, so each read goes through ``_lock``; the lock covers exactly
one library call and is never held across request processing.
"""
from __future__ import annotations

import math
import threading
from typing import Any, Dict, List, Sequence

import netCDF4
import numpy as np

from constants import NC_TYPE_NAMES
from errors import DimensionNotFound, FileFormatError, MissingVariable


def _nc_type_name(var) -> str:
    dtype = var.dtype
    if dtype is str:
        return "string"
    code = dtype.str.lstrip("<>=|")
    return NC_TYPE_NAMES.get(code, code)


def _plain(value):
    """Convert numpy attribute values into JSON-friendly Python values; non-finite floats become None."""
    if isinstance(value, (np.ndarray, np.generic)):
        value = value.tolist()
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


class GriddedDataset:
    def __init__(self, path: str, handle: "netCDF4.Dataset"):
        self.path = path
        self._nc = handle
        self._lock = threading.Lock()
        self._closed = False
        # Dimension sizes are fixed for the life of the process
        self._dims: Dict[str, int] = {name: len(dim) for name, dim in handle.dimensions.items()}

    @classmethod
    def open(cls, path: str) -> "GriddedDataset":
        try:
            handle = netCDF4.Dataset(path, "r")
        except (OSError, RuntimeError, ValueError) as exc:
            raise FileFormatError(path, str(exc)) from exc
        handle.set_auto_maskandscale(False)
        return cls(path, handle)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self) -> None:
        with self._lock:
            if not self._closed:
                self._nc.close()
                self._closed = True

    # ─── Metadata ───

    def dimension_size(self, name: str) -> int:
        if name not in self._dims:
            raise DimensionNotFound(name)
        return self._dims[name]

    def list_dimensions(self) -> Dict[str, int]:
        return dict(self._dims)

    def has_variable(self, name: str) -> bool:
        return name in self._nc.variables

    def list_variables(self) -> Dict[str, Dict[str, Any]]:
        out: Dict[str, Dict[str, Any]] = {}
        with self._lock:
            for name, var in self._nc.variables.items():
                out[name] = {
                    "type": _nc_type_name(var),
                    "dimensions": list(var.dimensions),
                    "attributes": {k: _plain(var.getncattr(k)) for k in var.ncattrs()},
                }
        return out

    # ─── Reads ───

    def _variable(self, name: str):
        try:
            return self._nc.variables[name]
        except KeyError:
            raise MissingVariable(name) from None

    def read_variable_1d(self, name: str, length: int) -> np.ndarray:
        var = self._variable(name)
        if length == 0:
            return np.empty(0, dtype=np.float64)
        with self._lock:
            raw = var[:length]
        return np.asarray(raw, dtype=np.float64).ravel()

    def read_slice_4d(self, name: str, start: Sequence[int], count: Sequence[int]) -> np.ndarray:
        """Read one hyperslab and return it flattened in row-major order."""
        var = self._variable(name)
        index = tuple(slice(s, s + c) for s, c in zip(start, count))
        with self._lock:
            raw = var[index]
        return np.asarray(raw, dtype=np.float64).ravel()

    def describe(self) -> Dict[str, Any]:
        """Payload for /get-info."""
        return {"dimensions": self.list_dimensions(), "variables": self.list_variables()}


def dimension_summary(dims: Dict[str, int], names: List[str]) -> str:
    return ", ".join(f"{n}={dims.get(n, '?')}" for n in names)
