"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from mhdcore.config import EDGES, BoundaryKind, DampingConfig, DriverConfig
from mhdcore.core.grid import Tile
from mhdcore.core.halo import SerialHaloExchange
from mhdcore.core.state import FieldSet


@pytest.fixture
def tile():
    """Small tile for fast unit tests."""
    return Tile(nx=8, ny=6, x_min=0.0, x_max=1.0, y_min=-0.5, y_max=1.0)


@pytest.fixture
def random_fields(tile):
    """FieldSet filled with reproducible random values, halo included."""
    rng = np.random.default_rng(1234)
    fields = FieldSet.allocate(tile)
    for name in fields.names():
        fields.get(name).data[:] = rng.standard_normal(fields.get(name).data.shape)
    return fields


@pytest.fixture
def user_kinds():
    """User-defined walls on every edge."""
    return {edge: BoundaryKind.USER for edge in EDGES}


@pytest.fixture
def periodic_kinds():
    return {edge: BoundaryKind.PERIODIC for edge in EDGES}


@pytest.fixture
def small_driver():
    """Cheap driver with few bins."""
    return DriverConfig(enabled=True, num_bins=16, min_omega=0.5, max_omega=4.0, seed=7)


@pytest.fixture
def make_manager(tile):
    """Factory for an initialized BoundaryConditionManager on ``tile``."""
    from mhdcore.boundary.manager import BoundaryConditionManager

    def _make(kinds, driver=None, damping=None, open_boundary=None, random_source=None):
        halo = SerialHaloExchange.from_kinds(tile, kinds)
        manager = BoundaryConditionManager(
            tile,
            halo,
            open_boundary=open_boundary,
            driver=driver if driver is not None else DriverConfig(),
            damping=damping if damping is not None else DampingConfig(),
            random_source=random_source,
        )
        manager.initialize(kinds)
        return manager

    return _make
