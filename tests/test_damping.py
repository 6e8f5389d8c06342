"""Tests for the velocity damping layer."""

from __future__ import annotations

import numpy as np
import pytest

from mhdcore.boundary.damping import DampingLayer, attenuation_factor
from mhdcore.config import Edge
from mhdcore.core.grid import Tile
from mhdcore.core.state import FieldSet


@pytest.fixture
def box():
    """40 x 40 unit box so a 5-cell layer leaves an undamped core."""
    return Tile(nx=40, ny=40, x_min=0.0, x_max=1.0, y_min=0.0, y_max=1.0)


def _unit_velocity(tile):
    fields = FieldSet.allocate(tile)
    for f in (fields.vx, fields.vy, fields.vz):
        f.fill(1.0)
    return fields


class TestAttenuationFactor:
    """Closed-form multiplier."""

    def test_unity_beyond_depth(self):
        assert attenuation_factor(1.0, 1.0, 0.5, 2.0) == 1.0
        assert attenuation_factor(3.0, 1.0, 0.5, 2.0) == 1.0

    def test_unity_at_edge(self):
        assert attenuation_factor(0.0, 1.0, 0.5, 2.0) == 1.0

    def test_formula(self):
        assert attenuation_factor(0.25, 1.0, 0.5, 2.0) == pytest.approx(1.0 / 1.25)

    def test_non_decreasing_toward_edge(self):
        distances = np.linspace(0.99, 0.0, 50)
        factors = [attenuation_factor(s, 1.0, 0.1, 3.0) for s in distances]
        assert np.all(np.diff(factors) >= 0.0)

    def test_never_amplifies(self):
        for s in np.linspace(0.0, 2.0, 41):
            assert 0.0 < attenuation_factor(s, 1.0, 1.0, 1.0) <= 1.0


class TestDampingLayer:
    """In-place damping of the three velocity components."""

    def test_disabled_is_noop(self, box):
        fields = _unit_velocity(box)
        layer = DampingLayer(box, enabled=False, n_cells=5.0)
        layer.apply((fields.vx, fields.vy, fields.vz), 0.1)
        assert np.all(fields.vx.data == 1.0)

    def test_depth_from_edge_cell_width(self, box):
        layer = DampingLayer(box, enabled=True, n_cells=5.0)
        assert layer.depth(Edge.X_MIN) == pytest.approx(5.0 / 40.0)
        assert layer.depth(Edge.Y_MAX) == pytest.approx(5.0 / 40.0)

    def test_single_edge_profile(self, box):
        fields = _unit_velocity(box)
        dt, scale, n_cells = 0.2, 1.5, 5.0
        layer = DampingLayer(box, enabled=True, n_cells=n_cells, damp_scale=scale,
                             global_edges=[Edge.X_MIN])
        layer.apply((fields.vx, fields.vy, fields.vz), dt)
        d = layer.depth(Edge.X_MIN)
        j = box.ny // 2
        for i in range(-1, box.nx + 2):
            s = abs(float(box.xb[i]) - box.x_min)
            expected = attenuation_factor(s, d, dt, scale)
            for f in (fields.vx, fields.vy, fields.vz):
                assert f[i, j] == pytest.approx(expected)

    def test_outer_halo_layer_untouched(self, box):
        fields = _unit_velocity(box)
        layer = DampingLayer(box, enabled=True, n_cells=5.0, global_edges=[Edge.X_MIN])
        layer.apply((fields.vx, fields.vy, fields.vz), 0.5)
        assert np.all(fields.vx[-2, :] == 1.0)
        assert np.all(fields.vx[:, -2] == 1.0)

    def test_core_undamped(self, box):
        fields = _unit_velocity(box)
        layer = DampingLayer(box, enabled=True, n_cells=5.0)
        layer.apply((fields.vx, fields.vy, fields.vz), 0.5)
        assert np.all(fields.vz[10:31, 10:31] == 1.0)

    def test_corner_double_damping(self, box):
        fields = _unit_velocity(box)
        dt, scale = 0.5, 1.0
        layer = DampingLayer(box, enabled=True, n_cells=5.0, damp_scale=scale)
        layer.apply((fields.vx, fields.vy, fields.vz), dt)
        d = layer.depth(Edge.X_MIN)
        i, j = 2, 3
        sx = float(box.xb[i]) - box.x_min
        sy = float(box.yb[j]) - box.y_min
        expected = attenuation_factor(sx, d, dt, scale) * attenuation_factor(sy, d, dt, scale)
        assert fields.vy[i, j] == pytest.approx(expected)
        assert fields.vy[i, j] < attenuation_factor(sx, d, dt, scale)

    def test_edge_order_fixed(self, box):
        layer = DampingLayer(box, enabled=True, global_edges=[Edge.Y_MAX, Edge.X_MIN, Edge.Y_MIN])
        assert layer.global_edges == (Edge.X_MIN, Edge.Y_MIN, Edge.Y_MAX)

    def test_no_global_edges(self, box):
        fields = _unit_velocity(box)
        layer = DampingLayer(box, enabled=True, global_edges=[])
        layer.apply((fields.vx, fields.vy, fields.vz), 0.5)
        assert np.all(fields.vx.data == 1.0)

    def test_ghost_vertices_use_mirrored_distance(self, box):
        fields = _unit_velocity(box)
        dt, scale = 0.5, 1.0
        layer = DampingLayer(box, enabled=True, n_cells=20.0, damp_scale=scale,
                             global_edges=[Edge.X_MIN, Edge.X_MAX])
        layer.apply((fields.vx, fields.vy, fields.vz), dt)
        d = layer.depth(Edge.X_MIN)
        dx = float(box.dxb[1])
        expected = attenuation_factor(dx, d, dt, scale)
        j = box.ny // 2
        assert fields.vx[-1, j] == pytest.approx(expected)
        assert fields.vx[box.nx + 1, j] == pytest.approx(expected)
        assert np.all(fields.vx.data <= 1.0)

    @pytest.mark.parametrize("edge", [Edge.X_MIN, Edge.X_MAX, Edge.Y_MIN, Edge.Y_MAX])
    def test_thin_layer_large_step_stays_finite(self, box, edge):
        fields = _unit_velocity(box)
        layer = DampingLayer(box, enabled=True, n_cells=0.5, damp_scale=1.0, global_edges=[edge])
        layer.apply((fields.vx, fields.vy, fields.vz), 0.5)
        for f in (fields.vx, fields.vy, fields.vz):
            assert np.all(np.isfinite(f.data))
            assert np.all((f.data > 0.0) & (f.data <= 1.0))

    def test_distance_non_negative(self, box):
        layer = DampingLayer(box, enabled=True)
        for edge in (Edge.X_MIN, Edge.X_MAX, Edge.Y_MIN, Edge.Y_MAX):
            assert np.all(layer.distance(edge) >= 0.0)
