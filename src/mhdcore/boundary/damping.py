"""Proximity-based velocity damping near the global domain edges.

Within a layer of depth ``d = n_cells * dx_edge`` next to each global edge,
every velocity component is divided by

    a = 1 + dt * damp_scale * s / d

where ``s >= 0`` is the distance of the vertex from the edge.  The relaxation is
linear in ``s``, not exponential, and vanishes for ``s >= d``.

Edges are processed one after another in the order x_min, x_max, y_min,
y_max.  A corner vertex inside the layers of two edges is divided twice.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

import numpy as np
from numba import njit

from mhdcore import constants
from mhdcore.config import EDGES, Edge
from mhdcore.core.grid import HaloArray, Tile

logger = logging.getLogger(__name__)


def attenuation_factor(distance: float, depth: float, dt: float, damp_scale: float) -> float:
    """Multiplier applied to a velocity component at ``distance`` from an edge.

    Args:
        distance: Distance of the vertex from the edge.
        depth: Damping layer depth ``d``.
        dt: Timestep.
        damp_scale: Damping strength.

    Returns:
        ``1 / (1 + dt * damp_scale * distance / depth)`` inside the layer,
        ``1.0`` at or beyond ``depth``.
    """
    if distance >= depth:
        return 1.0
    return 1.0 / (1.0 + dt * damp_scale * distance / depth)


@njit(cache=True)
def _damp_edge_kernel(
    vx: np.ndarray,
    vy: np.ndarray,
    vz: np.ndarray,
    distance: np.ndarray,
    axis: int,
    depth: float,
    dt: float,
    damp_scale: float,
    i_lo: int,
    i_hi: int,
    j_lo: int,
    j_hi: int,
) -> None:
    """Divide the velocity inside one edge's layer, in place.

    ``distance`` is indexed along ``axis`` in storage coordinates and the
    loop bounds are inclusive storage indices.
    """
    for j in range(j_lo, j_hi + 1):
        for i in range(i_lo, i_hi + 1):
            if axis == 0:
                s = distance[i]
            else:
                s = distance[j]
            if s < depth:
                a = dt * damp_scale * s / depth + 1.0
                vx[i, j] = vx[i, j] / a
                vy[i, j] = vy[i, j] / a
                vz[i, j] = vz[i, j] / a


class DampingLayer:
    """Velocity relaxation layer on the global edges of a tile.

    Args:
        tile: Tile geometry.
        enabled: When False, :meth:`apply` does nothing.
        n_cells: Layer depth in units of the edge cell width.
        damp_scale: Damping strength.
        global_edges: Edges of this tile on the global domain boundary.
    """

    def __init__(
        self,
        tile: Tile,
        enabled: bool = False,
        n_cells: float = constants.DAMPING_N_CELLS,
        damp_scale: float = constants.DAMPING_SCALE,
        global_edges: Iterable[Edge] = EDGES,
    ) -> None:
        self.tile = tile
        self.enabled = enabled
        self.n_cells = n_cells
        self.damp_scale = damp_scale
        # Keep the fixed processing order regardless of how edges were given.
        edges = set(global_edges)
        self.global_edges = tuple(edge for edge in EDGES if edge in edges)

    @classmethod
    def from_config(cls, tile: Tile, damping, global_edges: Iterable[Edge] = EDGES) -> DampingLayer:
        """Build from a :class:`~mhdcore.config.DampingConfig`."""
        return cls(
            tile,
            enabled=damping.enabled,
            n_cells=damping.n_cells,
            damp_scale=damping.damp_scale,
            global_edges=global_edges,
        )

    def depth(self, edge: Edge) -> float:
        """Layer depth ``n_cells`` times the width of the cell touching ``edge``."""
        t = self.tile
        width = {
            Edge.X_MIN: t.dxb[1],
            Edge.X_MAX: t.dxb[t.nx],
            Edge.Y_MIN: t.dyb[1],
            Edge.Y_MAX: t.dyb[t.ny],
        }[edge]
        return self.n_cells * float(width)

    def distance(self, edge: Edge) -> np.ndarray:
        """Unsigned distance of every vertex from ``edge``, in storage order along its axis.

        Ghost vertices beyond the edge get their mirrored distance, so the
        divisor stays at least 1.
        """
        t = self.tile
        if edge == Edge.X_MIN:
            offset = t.xb.data - t.x_min
        elif edge == Edge.X_MAX:
            offset = t.x_max - t.xb.data
        elif edge == Edge.Y_MIN:
            offset = t.yb.data - t.y_min
        else:
            offset = t.y_max - t.yb.data
        return np.abs(offset)

    def apply(self, velocities: Sequence[HaloArray], dt: float) -> None:
        """Damp ``(vx, vy, vz)`` in place on every global edge.

        Args:
            velocities: The three velocity components.
            dt: Timestep.
        """
        if not self.enabled:
            return
        vx, vy, vz = velocities
        t = self.tile
        ng = t.ng
        # Vertices -1 .. n+1 in logical coordinates.
        i_lo, i_hi = ng - 1, t.nx + ng + 1
        j_lo, j_hi = ng - 1, t.ny + ng + 1
        for edge in self.global_edges:
            axis = 0 if edge in (Edge.X_MIN, Edge.X_MAX) else 1
            _damp_edge_kernel(
                vx.data, vy.data, vz.data,
                np.ascontiguousarray(self.distance(edge)),
                axis, self.depth(edge), dt, self.damp_scale,
                i_lo, i_hi, j_lo, j_hi,
            )
        logger.debug("Damped velocity on %d edges (dt=%.3e)", len(self.global_edges), dt)
