#!/usr/bin/env python3
"""Write a small NetCDF file in the layout gridslice serves.

Usage:
  python3 scripts/make_sample_dataset.py out.nc [--time 4 --z 3 --y 40 --x 60]
"""

from __future__ import annotations

import argparse
import sys
from typing import Iterable

import numpy as np
from netCDF4 import Dataset


def write_gridded_file(path: str, *, x, y, concentration, skip: Iterable[str] = (), fmt: str = "NETCDF4") -> str:
    """Write dims (time, z, y, x), coordinate vars x/y and a 4-D concentration field.

    Variables named in ``skip`` are left out so callers can build incomplete files.
    """
    conc = np.asarray(concentration, dtype=np.float64)
    if conc.ndim != 4:
        raise ValueError(f"concentration must be 4-D (time, z, y, x), got shape {conc.shape}")
    nt, nz, ny, nx = conc.shape
    skip = set(skip)

    with Dataset(path, "w", format=fmt) as nc:
        nc.createDimension("time", nt)
        nc.createDimension("z", nz)
        nc.createDimension("y", ny)
        nc.createDimension("x", nx)
        nc.title = "gridslice sample dataset"

        if "x" not in skip:
            v_x = nc.createVariable("x", "f8", ("x",))
            v_x.units = "m"
            v_x[:] = np.asarray(x, dtype=np.float64)
        if "y" not in skip:
            v_y = nc.createVariable("y", "f8", ("y",))
            v_y.units = "m"
            v_y[:] = np.asarray(y, dtype=np.float64)
        if "concentration" not in skip:
            v_c = nc.createVariable("concentration", "f8", ("time", "z", "y", "x"))
            v_c.units = "mg m-3"
            v_c.long_name = "tracer concentration"
            if conc.size:
                v_c[:] = conc
    return path


def synthetic_plume(nt: int, nz: int, ny: int, nx: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    x = np.linspace(0.0, 1000.0, nx)
    y = np.linspace(0.0, 800.0, ny)
    xx, yy = np.meshgrid(x, y)
    conc = np.empty((nt, nz, ny, nx))
    for t in range(nt):
        cx = 200.0 + 150.0 * t
        for k in range(nz):
            sigma = 80.0 + 40.0 * k
            conc[t, k] = np.exp(-((xx - cx) ** 2 + (yy - 400.0) ** 2) / (2.0 * sigma ** 2)) / (1.0 + k)
    return x, y, conc


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("out")
    ap.add_argument("--time", type=int, default=4)
    ap.add_argument("--z", type=int, default=3)
    ap.add_argument("--y", type=int, default=40)
    ap.add_argument("--x", type=int, default=60)
    args = ap.parse_args()

    x, y, conc = synthetic_plume(args.time, args.z, args.y, args.x)
    write_gridded_file(args.out, x=x, y=y, concentration=conc)
    print(f"Wrote {args.out} time={args.time} z={args.z} y={args.y} x={args.x}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
