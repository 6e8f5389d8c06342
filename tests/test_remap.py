"""Tests for the out-of-plane magnetic field remap.

Test categories:
1. Identities (zero velocity, uniform advection)
2. Face-flux sign convention and telescoping
3. Boundary refresh after the remap
"""

from __future__ import annotations

import numpy as np
import pytest

from mhdcore.boundary.manager import BoundaryConditionManager, zero_gradient
from mhdcore.config import EDGES, BoundaryKind
from mhdcore.core.grid import Tile
from mhdcore.core.halo import SerialHaloExchange
from mhdcore.core.state import FieldSet
from mhdcore.remap.zremap import (
    MagneticRemap,
    face_fluxes,
    remap_bz_increment,
    remap_bz_inplace,
)


def _manager(tile, kind=BoundaryKind.USER):
    kinds = {edge: kind for edge in EDGES}
    manager = BoundaryConditionManager(tile, SerialHaloExchange.from_kinds(tile, kinds))
    manager.initialize(kinds)
    return manager


class TestIdentities:
    """Cases where bz must not change."""

    def test_zero_velocity_leaves_bz(self, random_fields):
        random_fields.vz1.fill(0.0)
        before = random_fields.bz.data.copy()
        remap_bz_inplace(random_fields.bz, random_fields.bx, random_fields.by, random_fields.vz1, 0.3)
        np.testing.assert_array_equal(random_fields.bz.data, before)

    def test_zero_velocity_with_boundary_refresh(self, tile, random_fields):
        random_fields.vz1.fill(0.0)
        before = random_fields.bz.interior.copy()
        MagneticRemap(_manager(tile)).remap_bz(random_fields, 0.3)
        np.testing.assert_array_equal(random_fields.bz.interior, before)

    def test_uniform_advection_interior_unchanged(self):
        tile = Tile(nx=4, ny=4)
        fields = FieldSet.allocate(tile)
        fields.bx.fill(1.0)
        fields.by.fill(1.0)
        fields.vz1.fill(1.0)
        rng = np.random.default_rng(0)
        fields.bz.data[:] = rng.standard_normal(fields.bz.data.shape)
        before = fields.bz.copy()
        MagneticRemap(_manager(tile)).remap_bz(fields, 1.0)
        np.testing.assert_array_equal(fields.bz.interior, before.interior)
        # Only the refreshed ghost layers differ from the starting field.
        expected = before.copy()
        for edge in EDGES:
            zero_gradient(expected, edge)
        np.testing.assert_array_equal(fields.bz.data, expected.data)
        changed = fields.bz.data != before.data
        assert not np.any(changed[3:7, 3:7])

    def test_uniform_advection_increment_zero(self):
        tile = Tile(nx=4, ny=4)
        fields = FieldSet.allocate(tile)
        for f in (fields.bx, fields.by, fields.vz1):
            f.fill(1.0)
        inc = remap_bz_increment(fields.bx, fields.by, fields.vz1, 1.0)
        assert np.all(inc.data == 0.0)

    def test_inputs_not_mutated(self, random_fields):
        bx, by, vz1 = (random_fields.bx.data.copy(), random_fields.by.data.copy(),
                       random_fields.vz1.data.copy())
        remap_bz_inplace(random_fields.bz, random_fields.bx, random_fields.by, random_fields.vz1, 0.1)
        np.testing.assert_array_equal(random_fields.bx.data, bx)
        np.testing.assert_array_equal(random_fields.by.data, by)
        np.testing.assert_array_equal(random_fields.vz1.data, vz1)


class TestFluxes:
    """Face fluxes and the telescoping property."""

    def test_single_x_face(self):
        tile = Tile(nx=6, ny=6)
        fields = FieldSet.allocate(tile)
        fields.vz1.fill(2.0)
        fields.bx[3, 3] = 0.5
        dt = 0.1
        inc = remap_bz_increment(fields.bx, fields.by, fields.vz1, dt)
        flux = dt * 2.0 * 0.5
        assert inc[3, 3] == pytest.approx(flux)
        assert inc[4, 3] == pytest.approx(-flux)
        mask = np.ones_like(inc.data, dtype=bool)
        mask[3 + 2, 3 + 2] = False
        mask[4 + 2, 3 + 2] = False
        assert np.all(inc.data[mask] == 0.0)

    def test_single_y_face(self):
        tile = Tile(nx=6, ny=6)
        fields = FieldSet.allocate(tile)
        fields.vz1[2, 2] = 1.0
        fields.vz1[1, 2] = 3.0
        fields.by[2, 2] = 1.0
        dt = 0.5
        inc = remap_bz_increment(fields.bx, fields.by, fields.vz1, dt)
        flux = dt * 0.5 * (1.0 + 3.0) * 1.0
        assert inc[2, 2] == pytest.approx(flux)
        assert inc[2, 3] == pytest.approx(-flux)

    def test_face_average_uses_straddling_vertices(self):
        tile = Tile(nx=4, ny=4)
        fields = FieldSet.allocate(tile)
        fields.bx.fill(1.0)
        fields.vz1[2, 2] = 4.0
        fx, _ = face_fluxes(fields.bx, fields.by, fields.vz1, 1.0)
        assert fx[2, 2] == pytest.approx(2.0)
        assert fx[2, 3] == pytest.approx(2.0)
        assert fx[2, 4] == 0.0
        assert fx[1, 2] == 0.0

    def test_block_sum_telescopes(self, random_fields):
        dt = 0.25
        f = random_fields
        inc = remap_bz_increment(f.bx, f.by, f.vz1, dt)
        fx, fy = face_fluxes(f.bx, f.by, f.vz1, dt)
        i0, i1, j0, j1 = 1, 6, 2, 5
        total = inc[i0:i1 + 1, j0:j1 + 1].sum()
        boundary = (
            fx[i1, j0:j1 + 1].sum() - fx[i0 - 1, j0:j1 + 1].sum()
            + fy[i0:i1 + 1, j1].sum() - fy[i0:i1 + 1, j0 - 1].sum()
        )
        np.testing.assert_allclose(total, boundary, rtol=1e-12, atol=1e-12)

    def test_increment_matches_inplace(self, random_fields):
        f = random_fields
        inc = remap_bz_increment(f.bx, f.by, f.vz1, 0.2)
        before = f.bz.data.copy()
        remap_bz_inplace(f.bz, f.bx, f.by, f.vz1, 0.2)
        np.testing.assert_allclose(f.bz.data - before, inc.data, atol=1e-12)

    def test_outer_halo_not_updated(self, random_fields):
        f = random_fields
        inc = remap_bz_increment(f.bx, f.by, f.vz1, 0.2)
        assert np.all(inc.data[0, :] == 0.0)
        assert np.all(inc.data[:, 0] == 0.0)
        assert np.all(inc.data[-1, :] == 0.0)
        assert np.all(inc.data[:, -1] == 0.0)


class TestBoundaryRefresh:
    """bz halo after the remap."""

    def test_user_walls_zero_gradient(self, tile, random_fields):
        MagneticRemap(_manager(tile)).remap_bz(random_fields, 0.1)
        bz = random_fields.bz
        nx, ny = tile.nx, tile.ny
        np.testing.assert_array_equal(bz[0, :], bz[1, :])
        np.testing.assert_array_equal(bz[-1, :], bz[2, :])
        np.testing.assert_array_equal(bz[nx + 1, :], bz[nx, :])
        np.testing.assert_array_equal(bz[:, ny + 2], bz[:, ny - 1])

    def test_periodic_refresh(self, tile, random_fields):
        MagneticRemap(_manager(tile, BoundaryKind.PERIODIC)).remap_bz(random_fields, 0.1)
        bz = random_fields.bz
        np.testing.assert_array_equal(bz[0, :], bz[tile.nx, :])
        np.testing.assert_array_equal(bz[:, tile.ny + 1], bz[:, 1])
