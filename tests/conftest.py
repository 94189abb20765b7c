"""Shared pytest fixtures for gridslice tests."""

from __future__ import annotations

import os
import sys
import tempfile

import numpy as np
import pytest
import requests

BACKEND_DIR = os.path.join(os.path.dirname(__file__), "..", "backend")
SCRIPTS_DIR = os.path.join(os.path.dirname(__file__), "..", "scripts")
sys.path.insert(0, SCRIPTS_DIR)
sys.path.insert(0, BACKEND_DIR)

# Keep test runs from writing into backend/logs
os.environ.setdefault("GRIDSLICE_LOG_DIR", tempfile.mkdtemp(prefix="gridslice-logs-"))

from make_sample_dataset import write_gridded_file  # noqa: E402

GRIDSLICE_BASE = os.environ.get("GRIDSLICE_BASE", "http://127.0.0.1:18080")

SAMPLE_X = [0.0, 1.0, 2.0]
SAMPLE_Y = [10.0, 20.0]
# time=2, z=1, y=2, x=3; t=1 is a constant field
SAMPLE_CONCENTRATION = np.array([
    [[[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]],
    [[[7.5, 7.5, 7.5], [7.5, 7.5, 7.5]]],
])


@pytest.fixture
def sample_path(tmp_path):
    return write_gridded_file(
        str(tmp_path / "sample.nc"),
        x=SAMPLE_X,
        y=SAMPLE_Y,
        concentration=SAMPLE_CONCENTRATION,
    )


@pytest.fixture
def make_dataset_file(tmp_path):
    """Factory for ad-hoc files: make_dataset_file(name, x=..., y=..., concentration=..., skip=...)."""
    def _make(name="custom.nc", **kwargs):
        kwargs.setdefault("x", SAMPLE_X)
        kwargs.setdefault("y", SAMPLE_Y)
        kwargs.setdefault("concentration", SAMPLE_CONCENTRATION)
        return write_gridded_file(str(tmp_path / name), **kwargs)
    return _make


@pytest.fixture
def dataset(sample_path):
    from services.dataset_access import GriddedDataset

    ds = GriddedDataset.open(sample_path)
    yield ds
    ds.close()


@pytest.fixture
def client_factory():
    """Build TestClients over a dataset; lifespan runs (and closes the dataset) on exit."""
    from fastapi.testclient import TestClient

    from app import create_app
    from status_ops import reset_stats

    clients = []

    def _make(ds, *, enable_image=True, raise_server_exceptions=True):
        reset_stats()
        c = TestClient(create_app(ds, enable_image=enable_image), raise_server_exceptions=raise_server_exceptions)
        c.__enter__()
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.__exit__(None, None, None)


@pytest.fixture
def client(dataset, client_factory):
    return client_factory(dataset)


def _reachable(url: str, timeout: float = 3.0) -> bool:
    try:
        r = requests.get(url + "/api/health", timeout=timeout)
        return r.status_code == 200
    except Exception:
        return False


@pytest.fixture(scope="session")
def gridslice_base():
    """URL of a running gridslice server. Skip session if not reachable."""
    if not _reachable(GRIDSLICE_BASE):
        pytest.skip(f"gridslice server not reachable at {GRIDSLICE_BASE} — set GRIDSLICE_BASE or start the server.")
    return GRIDSLICE_BASE
