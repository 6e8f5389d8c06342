"""Abstract interfaces of the collaborators outside the boundary and remap core.

Defines the contracts the core calls into:
- ``HaloExchangeBase`` — neighbour-to-neighbour ghost-cell synchronisation
- ``OpenBoundaryBase`` — characteristic treatment of open edges
- ``RandomSource`` — deterministic uniform stream for the wave driver
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping

import numpy as np

from mhdcore.config import EDGES, Edge
from mhdcore.constants import NO_NEIGHBOR
from mhdcore.core.grid import HaloArray


class HaloExchangeBase(ABC):
    """Abstract base for halo exchange across the process grid."""

    @abstractmethod
    def exchange(self, name: str, field: HaloArray) -> None:
        """Fill the ghost cells of ``field`` from neighbouring tiles.

        Blocks until the exchange is complete.  Ghost cells on edges whose
        neighbour is ``NO_NEIGHBOR`` may hold meaningless values afterwards.

        Args:
            name: Field name, e.g. ``"bz"``.
            field: Field to synchronise in place.
        """

    @abstractmethod
    def neighbors(self) -> Mapping[Edge, int]:
        """Return the neighbour rank of each edge (``NO_NEIGHBOR`` on the global boundary)."""


class OpenBoundaryBase(ABC):
    """Abstract base for open (characteristic) edge treatments."""

    @abstractmethod
    def apply(self, name: str, field: HaloArray, edge: Edge) -> None:
        """Fill the ghost cells of ``field`` on an open global edge."""


class RandomSource(ABC):
    """Sequential stream of uniform deviates in ``[0, 1)``."""

    @abstractmethod
    def uniform(self) -> float:
        """Return the next deviate."""


class SeededRandomSource(RandomSource):
    """Uniform stream from a seeded :func:`numpy.random.default_rng`."""

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform(self) -> float:
        return float(self._rng.random())


class SequenceRandomSource(RandomSource):
    """Replays a fixed sequence of deviates, cycling when exhausted."""

    def __init__(self, values: Iterable[float]) -> None:
        self._values = [float(v) for v in values]
        if not self._values:
            raise ValueError("SequenceRandomSource needs at least one value")
        self._pos = 0

    def uniform(self) -> float:
        value = self._values[self._pos % len(self._values)]
        self._pos += 1
        return value


def global_neighbors() -> dict[Edge, int]:
    """Neighbour map of a tile that touches the global boundary on every edge."""
    return {edge: NO_NEIGHBOR for edge in EDGES}
