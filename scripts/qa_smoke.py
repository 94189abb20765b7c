#!/usr/bin/env python3
"""gridslice smoke checks against a running server.

Usage:
  python3 scripts/qa_smoke.py [--base http://127.0.0.1:18080]
"""

from __future__ import annotations

import argparse
import sys

import requests

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def assert_ok(cond: bool, msg: str):
    if not cond:
        raise AssertionError(msg)


def check_core(base: str) -> dict:
    r = requests.get(base + "/", timeout=20)
    assert_ok(r.status_code == 200, f"/ returned {r.status_code}")
    assert_ok("/get-data" in r.text, "/ usage text does not mention /get-data")

    r = requests.get(base + "/get-info", timeout=20)
    assert_ok(r.status_code == 200, f"/get-info returned {r.status_code}")
    info = r.json()
    for k in ("dimensions", "variables"):
        assert_ok(k in info, f"/get-info missing {k}")
    for d in ("time", "z", "y", "x"):
        assert_ok(d in info["dimensions"], f"/get-info missing dimension {d}")
    return info


def check_data(base: str, dims: dict):
    r = requests.get(base + "/get-data", params={"t": 0, "z": 0}, timeout=30)
    assert_ok(r.status_code == 200, f"/get-data failed: {r.status_code}")
    grid = r.json().get("concentration_data")
    assert_ok(isinstance(grid, list), "/get-data missing concentration_data")
    assert_ok(len(grid) == dims["y"], f"expected {dims['y']} rows, got {len(grid)}")
    if grid:
        assert_ok(len(grid[0]) == dims["x"], f"expected {dims['x']} columns, got {len(grid[0])}")
        cell = grid[0][0]
        for k in ("x", "y", "concentration"):
            assert_ok(k in cell, f"cell missing {k}")


def check_image(base: str):
    r = requests.get(base + "/get-image", params={"t": 0, "z": 0}, timeout=30)
    if r.status_code == 404:
        print("  /get-image disabled, skipped")
        return
    assert_ok(r.status_code == 200, f"/get-image failed: {r.status_code}")
    assert_ok(r.headers.get("content-type", "").startswith("image/png"), "/get-image content-type is not image/png")
    assert_ok(r.content.startswith(PNG_MAGIC), "/get-image body is not a PNG")


def check_errors(base: str, dims: dict):
    cases = [
        ({"z": 0}, "missing t"),
        ({"t": 0}, "missing z"),
        ({"t": "abc", "z": 0}, "non-integer t"),
        ({"t": dims["time"], "z": 0}, "t out of bounds"),
        ({"t": 0, "z": dims["z"]}, "z out of bounds"),
    ]
    for params, label in cases:
        r = requests.get(base + "/get-data", params=params, timeout=20)
        assert_ok(r.status_code == 400, f"{label}: expected 400, got {r.status_code}")
        assert_ok("error" in r.json(), f"{label}: body has no error field")


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--base", default="http://127.0.0.1:18080")
    args = ap.parse_args()
    base = args.base.rstrip("/")

    info = check_core(base)
    dims = info["dimensions"]
    check_data(base, dims)
    check_image(base)
    check_errors(base, dims)

    print("PASS")
    return 0


if __name__ == "__main__":
    sys.exit(main())
