"""Tests for backend/slice_extract.py — parameter parsing, validation order, extraction."""

from __future__ import annotations

import numpy as np
import pytest

from errors import InvalidParameter, MissingVariable, OutOfBounds
from services.dataset_access import GriddedDataset
from slice_extract import GridSlice, SliceRequest, extract_slice, parse_slice_request


class _FakeDataset:
    """In-memory stand-in exposing the accessor methods the extractor uses."""

    def __init__(self, dims, variables=("x", "y", "concentration")):
        self.dims = dims
        self.variables = set(variables)
        self.slice_reads = 0

    def dimension_size(self, name):
        return self.dims[name]

    def has_variable(self, name):
        return name in self.variables

    def read_variable_1d(self, name, length):
        return np.arange(length, dtype=np.float64)

    def read_slice_4d(self, name, start, count):
        self.slice_reads += 1
        return np.zeros(count[2] * count[3])


# ─── parse_slice_request ───

def test_parse_valid():
    assert parse_slice_request("1", "0") == SliceRequest(time_index=1, z_index=0)


def test_parse_leading_zero_and_whitespace():
    assert parse_slice_request("05", " 2 ") == SliceRequest(time_index=5, z_index=2)


@pytest.mark.parametrize("t, z, param", [
    (None, "0", "t"),
    ("0", None, "z"),
    (None, None, "t"),
    ("-1", "0", "t"),
    ("abc", "0", "t"),
    ("1.5", "0", "t"),
    ("0", "", "z"),
    ("0", "²", "z"),
    ("bad", "bad", "t"),
])
def test_parse_invalid(t, z, param):
    with pytest.raises(InvalidParameter) as ei:
        parse_slice_request(t, z)
    assert ei.value.param == param
    assert ei.value.status_code == 400


# ─── extract_slice ───

def test_extract_sample(dataset):
    grid = extract_slice(dataset, SliceRequest(0, 0))
    assert grid.row_size == 3
    assert grid.col_size == 2
    assert grid.x_coords.tolist() == [0.0, 1.0, 2.0]
    assert grid.y_coords.tolist() == [10.0, 20.0]
    assert grid.values.tolist() == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    assert grid.values_2d().tolist() == [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]


def test_extract_second_time_step(dataset):
    grid = extract_slice(dataset, SliceRequest(1, 0))
    assert grid.values.tolist() == [7.5] * 6


def test_extract_lengths_match_dimensions(make_dataset_file):
    rng = np.random.default_rng(7)
    conc = rng.normal(size=(3, 4, 5, 6))
    path = make_dataset_file("big.nc", x=np.linspace(0, 1, 6), y=np.linspace(0, 1, 5), concentration=conc)
    with GriddedDataset.open(path) as ds:
        for t in range(3):
            for z in range(4):
                grid = extract_slice(ds, SliceRequest(t, z))
                assert grid.values.size == grid.row_size * grid.col_size == 30
                np.testing.assert_array_equal(grid.values_2d(), conc[t, z])


def test_time_out_of_bounds(dataset):
    with pytest.raises(OutOfBounds) as ei:
        extract_slice(dataset, SliceRequest(2, 0))
    assert ei.value.param == "t"
    assert ei.value.status_code == 400


def test_z_out_of_bounds(dataset):
    with pytest.raises(OutOfBounds) as ei:
        extract_slice(dataset, SliceRequest(0, 1))
    assert ei.value.param == "z"


def test_time_checked_before_z(dataset):
    with pytest.raises(OutOfBounds) as ei:
        extract_slice(dataset, SliceRequest(99, 99))
    assert ei.value.param == "t"


@pytest.mark.parametrize("missing", ["x", "y", "concentration"])
def test_missing_variable(make_dataset_file, missing):
    path = make_dataset_file(f"no_{missing}.nc", skip=[missing])
    with GriddedDataset.open(path) as ds:
        with pytest.raises(MissingVariable) as ei:
            extract_slice(ds, SliceRequest(0, 0))
    assert ei.value.name == missing
    assert ei.value.status_code == 500


def test_bounds_checked_before_variables(make_dataset_file):
    path = make_dataset_file("no_conc.nc", skip=["concentration"])
    with GriddedDataset.open(path) as ds:
        with pytest.raises(OutOfBounds):
            extract_slice(ds, SliceRequest(5, 0))


def test_zero_sized_dimension_gives_empty_slice():
    ds = _FakeDataset({"time": 1, "z": 1, "y": 4, "x": 0})
    grid = extract_slice(ds, SliceRequest(0, 0))
    assert isinstance(grid, GridSlice)
    assert grid.values.size == 0
    assert grid.row_size == 0
    assert grid.col_size == 4
    assert ds.slice_reads == 0


def test_validation_happens_before_reads():
    ds = _FakeDataset({"time": 1, "z": 1, "y": 2, "x": 2})
    with pytest.raises(OutOfBounds):
        extract_slice(ds, SliceRequest(0, 3))
    assert ds.slice_reads == 0
