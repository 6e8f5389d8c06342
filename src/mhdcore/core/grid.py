"""Origin-shifted halo arrays and tile geometry.

Each process owns one tile of ``nx x ny`` cells surrounded by ``ng`` halo
layers.  Fields are addressed with LOGICAL indices running from ``-ng`` to
``n + ng`` inclusive, so the first interior cell is ``1`` and the cells
``0, -1`` (and ``n+1, n+2``) are ghosts.  :class:`HaloArray` maps those
logical indices onto a plain zero-based numpy buffer:

    storage = logical + ng

Negative integers are logical coordinates, never Python wrap-around.
Slices keep Python's exclusive stop, e.g. ``f[-2:1, :]`` is the three
layers ``-2, -1, 0`` along x.

Vertex coordinates follow the staggered layout: vertex ``0`` sits on the
lower domain edge and vertex ``n`` on the upper one, and
``dxb[i] = xb[i] - xb[i-1]`` is the width of cell ``i``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from mhdcore.constants import NG
from mhdcore.errors import GridError


class HaloArray:
    """A float64 array indexed by logical (possibly negative) grid coordinates.

    Args:
        shape: Interior size per axis, e.g. ``(nx, ny)`` or ``(nx,)``.
        ng: Halo depth on each side.
        data: Optional existing storage of shape ``n + 2*ng + 1`` per axis.
    """

    __slots__ = ("data", "shape", "ng")

    def __init__(
        self,
        shape: tuple[int, ...],
        ng: int = NG,
        data: np.ndarray | None = None,
    ) -> None:
        self.shape = tuple(int(n) for n in shape)
        self.ng = ng
        storage_shape = tuple(n + 2 * ng + 1 for n in self.shape)
        if data is None:
            data = np.zeros(storage_shape, dtype=np.float64)
        elif data.shape != storage_shape:
            raise GridError(f"storage shape {data.shape} does not match {storage_shape}")
        self.data = data

    # --- index mapping ---

    def _map_axis(self, key, axis: int):
        n = self.shape[axis]
        if isinstance(key, slice):
            start = None if key.start is None else self._map_int(key.start, n, allow_end=True)
            stop = None if key.stop is None else self._map_int(key.stop, n, allow_end=True)
            return slice(start, stop, key.step)
        return self._map_int(key, n)

    def _map_int(self, i: int, n: int, allow_end: bool = False) -> int:
        hi = n + self.ng + (1 if allow_end else 0)
        if i < -self.ng or i > hi:
            raise IndexError(f"logical index {i} outside [{-self.ng}, {n + self.ng}]")
        return i + self.ng

    def _map(self, key):
        if not isinstance(key, tuple):
            key = (key,)
        if len(key) > len(self.shape):
            raise IndexError(f"too many indices for {len(self.shape)}-d HaloArray")
        return tuple(self._map_axis(k, axis) for axis, k in enumerate(key))

    def __getitem__(self, key):
        return self.data[self._map(key)]

    def __setitem__(self, key, value) -> None:
        self.data[self._map(key)] = value

    # --- views ---

    @property
    def interior(self) -> np.ndarray:
        """View of the logical ``1..n`` block on every axis."""
        return self.data[tuple(slice(self.ng + 1, self.ng + n + 1) for n in self.shape)]

    def copy(self) -> HaloArray:
        return HaloArray(self.shape, self.ng, self.data.copy())

    def fill(self, value: float) -> None:
        self.data.fill(value)

    def __repr__(self) -> str:
        return f"HaloArray(shape={self.shape}, ng={self.ng})"


@dataclass
class Tile:
    """Geometry of one subdomain with a uniform staggered grid.

    Attributes:
        nx, ny: Interior cells along x and y.
        x_min, x_max, y_min, y_max: Physical extents of the domain edges
            this tile's vertex ``0`` and vertex ``n`` sit on.
        ng: Halo depth (at least 2 for the boundary and remap stencils).
        xb, yb: Vertex coordinates over ``-ng .. n+ng``.
        dxb, dyb: Cell widths, ``dxb[i] = xb[i] - xb[i-1]``.
    """

    nx: int
    ny: int
    x_min: float = 0.0
    x_max: float = 1.0
    y_min: float = 0.0
    y_max: float = 1.0
    ng: int = NG
    xb: HaloArray = field(init=False, repr=False)
    yb: HaloArray = field(init=False, repr=False)
    dxb: HaloArray = field(init=False, repr=False)
    dyb: HaloArray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.nx <= 0 or self.ny <= 0:
            raise GridError(f"tile size must be positive, got ({self.nx}, {self.ny})")
        if self.ng < 2:
            raise GridError(f"halo depth must be at least 2, got {self.ng}")
        if self.x_max <= self.x_min or self.y_max <= self.y_min:
            raise GridError("domain extents must be increasing")
        self.xb, self.dxb = self._vertices(self.nx, self.x_min, self.x_max)
        self.yb, self.dyb = self._vertices(self.ny, self.y_min, self.y_max)

    def _vertices(self, n: int, lo: float, hi: float) -> tuple[HaloArray, HaloArray]:
        spacing = (hi - lo) / n
        xb = HaloArray((n,), self.ng)
        xb.data[:] = lo + spacing * np.arange(-self.ng, n + self.ng + 1)
        dxb = HaloArray((n,), self.ng)
        dxb.data[1:] = np.diff(xb.data)
        dxb.data[0] = dxb.data[1]
        return xb, dxb

    @classmethod
    def from_config(cls, grid) -> Tile:
        """Build a tile from a :class:`~mhdcore.config.GridConfig`."""
        return cls(
            nx=grid.nx,
            ny=grid.ny,
            x_min=grid.x_min,
            x_max=grid.x_max,
            y_min=grid.y_min,
            y_max=grid.y_max,
        )

    @property
    def num_columns(self) -> int:
        """Stored columns along x, including the halo."""
        return self.nx + 2 * self.ng + 1

    def new_field(self, value: float = 0.0) -> HaloArray:
        """Allocate a field covering the whole tile including its halo."""
        f = HaloArray((self.nx, self.ny), self.ng)
        if value != 0.0:
            f.fill(value)
        return f
