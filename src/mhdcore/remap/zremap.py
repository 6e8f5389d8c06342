"""Remap of the out-of-plane magnetic field ``bz``.

In 2.5D the out-of-plane velocity ``vz`` does not move the grid, so its
contribution to the induction equation,

    dBz/dt = d(vz Bx)/dx + d(vz By)/dy,

is applied after the Lagrangian step as a finite-volume flux update.  The
face fluxes use the half-step predictor velocity averaged onto the face:

    F[i, j] = dt * 0.5 * (vz1[i, j] + vz1[i, j-1]) * bx[i, j]     (x-faces)
    G[i, j] = dt * 0.5 * (vz1[i, j] + vz1[i-1, j]) * by[i, j]     (y-faces)

and are differenced in two sweeps,

    bz[i, j] += F[i, j] - F[i-1, j]       (sweep 1)
    bz[i, j] += G[i, j] - G[i, j-1]       (sweep 2)

over logical ``i, j = -1 .. n+1``.  Each face flux is computed once and
enters the two cells sharing that face with opposite signs, so summing the
update over any block of cells leaves only the fluxes through the block's
outer faces.  This keeps ``bz`` consistent with the divergence-free
in-plane field maintained by constrained transport.

Sweep 2 starts only after sweep 1 has finished over the whole tile.
"""

from __future__ import annotations

import logging

import numpy as np
from numba import njit

from mhdcore.boundary.manager import BoundaryConditionManager
from mhdcore.core.grid import HaloArray
from mhdcore.core.state import FieldSet

logger = logging.getLogger(__name__)


@njit(cache=True)
def _face_flux_kernel(
    bx: np.ndarray,
    by: np.ndarray,
    vz1: np.ndarray,
    dt: float,
    lo: int,
    hi_i: int,
    hi_j: int,
) -> tuple[np.ndarray, np.ndarray]:
    """Face fluxes of the bz update in storage coordinates.

    ``F`` is filled for ``i = lo-1 .. hi_i`` and ``j = lo .. hi_j``;
    ``G`` for ``i = lo .. hi_i`` and ``j = lo-1 .. hi_j``.  Other entries
    stay zero.
    """
    fx = np.zeros_like(bx)
    fy = np.zeros_like(by)
    for j in range(lo, hi_j + 1):
        for i in range(lo - 1, hi_i + 1):
            v_advect = (vz1[i, j] + vz1[i, j - 1]) * 0.5
            fx[i, j] = v_advect * bx[i, j] * dt
    for j in range(lo - 1, hi_j + 1):
        for i in range(lo, hi_i + 1):
            v_advect = (vz1[i, j] + vz1[i - 1, j]) * 0.5
            fy[i, j] = v_advect * by[i, j] * dt
    return fx, fy


@njit(cache=True)
def _remap_z_kernel(
    bz: np.ndarray,
    fx: np.ndarray,
    fy: np.ndarray,
    lo: int,
    hi_i: int,
    hi_j: int,
) -> None:
    """Apply both flux-difference sweeps to ``bz`` in place."""
    for j in range(lo, hi_j + 1):
        for i in range(lo, hi_i + 1):
            bz[i, j] += fx[i, j] - fx[i - 1, j]
    for j in range(lo, hi_j + 1):
        for i in range(lo, hi_i + 1):
            bz[i, j] += fy[i, j] - fy[i, j - 1]


def _bounds(bz: HaloArray) -> tuple[int, int, int]:
    # Logical -1 .. n+1 in storage coordinates.
    nx, ny = bz.shape
    ng = bz.ng
    return ng - 1, nx + ng + 1, ny + ng + 1


def face_fluxes(
    bx: HaloArray,
    by: HaloArray,
    vz1: HaloArray,
    dt: float,
) -> tuple[HaloArray, HaloArray]:
    """Return the x-face and y-face fluxes ``(F, G)`` of the bz update."""
    lo, hi_i, hi_j = _bounds(bx)
    fx, fy = _face_flux_kernel(bx.data, by.data, vz1.data, dt, lo, hi_i, hi_j)
    return HaloArray(bx.shape, bx.ng, fx), HaloArray(by.shape, by.ng, fy)


def remap_bz_inplace(
    bz: HaloArray,
    bx: HaloArray,
    by: HaloArray,
    vz1: HaloArray,
    dt: float,
) -> None:
    """Two-sweep flux update of ``bz`` without touching its halo afterwards."""
    lo, hi_i, hi_j = _bounds(bz)
    fx, fy = _face_flux_kernel(bx.data, by.data, vz1.data, dt, lo, hi_i, hi_j)
    _remap_z_kernel(bz.data, fx, fy, lo, hi_i, hi_j)


def remap_bz_increment(
    bx: HaloArray,
    by: HaloArray,
    vz1: HaloArray,
    dt: float,
) -> HaloArray:
    """Change the remap would make to ``bz``, leaving every input untouched."""
    increment = HaloArray(bx.shape, bx.ng)
    remap_bz_inplace(increment, bx, by, vz1, dt)
    return increment


class MagneticRemap:
    """Out-of-plane field remap followed by the bz boundary refresh.

    Args:
        boundaries: Boundary manager used to refresh the bz halo.
    """

    def __init__(self, boundaries: BoundaryConditionManager) -> None:
        self.boundaries = boundaries

    def remap_bz(self, fields: FieldSet, dt: float) -> None:
        """Advect ``fields.bz`` by ``fields.vz1`` across the faces of bx and by.

        Args:
            fields: Fields of the tile; ``bz`` is modified in place.
            dt: Timestep.
        """
        remap_bz_inplace(fields.bz, fields.bx, fields.by, fields.vz1, dt)
        self.boundaries.bz_bcs(fields.bz)
        logger.debug("Remapped bz (dt=%.3e)", dt)
