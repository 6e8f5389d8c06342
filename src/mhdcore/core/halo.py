"""Halo exchange for a single tile covering the whole domain.

When one process owns the whole domain, a periodic axis is its own
neighbour: the ghost layers ``-ng..0`` take the values ``n-ng..n`` and the
layers ``n+1..n+ng`` take ``1..ng``.  Non-periodic edges touch the global
boundary and their ghost cells are left untouched for the boundary manager.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from mhdcore.config import BoundaryKind, Edge
from mhdcore.constants import NO_NEIGHBOR
from mhdcore.core.bases import HaloExchangeBase
from mhdcore.core.grid import HaloArray, Tile

logger = logging.getLogger(__name__)

_SELF_RANK = 0


class SerialHaloExchange(HaloExchangeBase):
    """Periodic wrap within one tile.

    Args:
        tile: Tile geometry.
        periodic_x: Wrap the x axis onto itself.
        periodic_y: Wrap the y axis onto itself.
    """

    def __init__(self, tile: Tile, periodic_x: bool = False, periodic_y: bool = False) -> None:
        self.tile = tile
        self.periodic_x = periodic_x
        self.periodic_y = periodic_y

    @classmethod
    def from_kinds(cls, tile: Tile, kinds: Mapping[Edge, BoundaryKind]) -> SerialHaloExchange:
        """Wrap each axis whose edges are both periodic."""
        return cls(
            tile,
            periodic_x=(
                kinds[Edge.X_MIN] == BoundaryKind.PERIODIC
                and kinds[Edge.X_MAX] == BoundaryKind.PERIODIC
            ),
            periodic_y=(
                kinds[Edge.Y_MIN] == BoundaryKind.PERIODIC
                and kinds[Edge.Y_MAX] == BoundaryKind.PERIODIC
            ),
        )

    def neighbors(self) -> dict[Edge, int]:
        x_rank = _SELF_RANK if self.periodic_x else NO_NEIGHBOR
        y_rank = _SELF_RANK if self.periodic_y else NO_NEIGHBOR
        return {Edge.X_MIN: x_rank, Edge.X_MAX: x_rank, Edge.Y_MIN: y_rank, Edge.Y_MAX: y_rank}

    def exchange(self, name: str, field: HaloArray) -> None:
        ng = field.ng
        nx, ny = field.shape
        d = field.data
        if self.periodic_x:
            d[0:ng + 1, :] = d[nx:nx + ng + 1, :]
            d[nx + ng + 1:, :] = d[ng + 1:2 * ng + 1, :]
        if self.periodic_y:
            d[:, 0:ng + 1] = d[:, ny:ny + ng + 1]
            d[:, ny + ng + 1:] = d[:, ng + 1:2 * ng + 1]
        logger.debug("Exchanged halo of %s", name)
