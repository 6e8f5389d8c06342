"""Boundary-condition manager: halo exchange plus per-edge ghost-cell rules.

Every per-field routine first calls the halo exchange for that field and
only then overwrites ghost cells on edges that touch the global domain
boundary, since the exchange may leave meaningless values there:

- ``periodic`` edges rely on the exchange alone,
- ``open`` edges are handed to the external characteristic routine,
- ``user`` edges get the reflective / no-slip / driven rules below.

User-defined rules (``n`` is ``nx`` or ``ny``):

============================  ===========================  ==============================
Field                         lower edge                   upper edge
============================  ===========================  ==============================
normal B (bx on x, by on y)   g[-1]=g[1], g[-2]=g[2]       g[n+1]=g[n-1], g[n+2]=g[n-2]
tangential B, bz, scalars     g[0]=g[1],  g[-1]=g[2]       g[n+1]=g[n],   g[n+2]=g[n-1]
velocity (no-slip wall)       g[-2..0] = 0                 g[n..n+2] = 0
velocity (driven, y_min)      vx=vy=0, vz=driver(t)        (not driven)
============================  ===========================  ==============================

The half-step predictor velocity is driven at ``t - dt/2`` so that it stays
centred with the predictor-corrector scheme.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from mhdcore.boundary.damping import DampingLayer
from mhdcore.boundary.spectrum import DrivenBoundarySpectrum
from mhdcore.config import EDGES, BoundaryKind, DampingConfig, DriverConfig, Edge
from mhdcore.constants import NO_NEIGHBOR
from mhdcore.core.bases import HaloExchangeBase, OpenBoundaryBase, RandomSource
from mhdcore.core.grid import HaloArray, Tile
from mhdcore.core.state import FieldSet
from mhdcore.errors import BoundaryConfigError

logger = logging.getLogger(__name__)

DRIVEN_EDGE = Edge.Y_MIN

_X_EDGES = (Edge.X_MIN, Edge.X_MAX)


# ============================================================
# Ghost-cell rules
# ============================================================

def mirror_normal(f: HaloArray, edge: Edge) -> None:
    """Zero-gradient mirror of a face-normal component about the boundary face."""
    nx, ny = f.shape
    if edge == Edge.X_MIN:
        f[-1, :] = f[1, :]
        f[-2, :] = f[2, :]
    elif edge == Edge.X_MAX:
        f[nx + 1, :] = f[nx - 1, :]
        f[nx + 2, :] = f[nx - 2, :]
    elif edge == Edge.Y_MIN:
        f[:, -1] = f[:, 1]
        f[:, -2] = f[:, 2]
    else:
        f[:, ny + 1] = f[:, ny - 1]
        f[:, ny + 2] = f[:, ny - 2]


def zero_gradient(f: HaloArray, edge: Edge) -> None:
    """Zero-gradient copy of the two interior layers nearest ``edge``."""
    nx, ny = f.shape
    if edge == Edge.X_MIN:
        f[0, :] = f[1, :]
        f[-1, :] = f[2, :]
    elif edge == Edge.X_MAX:
        f[nx + 1, :] = f[nx, :]
        f[nx + 2, :] = f[nx - 1, :]
    elif edge == Edge.Y_MIN:
        f[:, 0] = f[:, 1]
        f[:, -1] = f[:, 2]
    else:
        f[:, ny + 1] = f[:, ny]
        f[:, ny + 2] = f[:, ny - 1]


def wall_layers(f: HaloArray, edge: Edge) -> tuple:
    """Index of the boundary vertex layer and the two ghost layers beyond it."""
    nx, ny = f.shape
    return {
        Edge.X_MIN: (slice(-2, 1), slice(None)),
        Edge.X_MAX: (slice(nx, nx + 3), slice(None)),
        Edge.Y_MIN: (slice(None), slice(-2, 1)),
        Edge.Y_MAX: (slice(None), slice(ny, ny + 3)),
    }[edge]


def no_slip(f: HaloArray, edge: Edge) -> None:
    """Zero the three wall layers of a velocity component."""
    f[wall_layers(f, edge)] = 0.0


# ============================================================
# Manager
# ============================================================

class BoundaryConditionManager:
    """Fills the halo of every field after its halo exchange.

    Args:
        tile: Tile geometry.
        halo: Halo exchange for this tile's process.
        open_boundary: Characteristic routine for open edges.
        driver: Driven-boundary parameters.
        damping: Damping-layer parameters.
        random_source: Replaces the seeded phase stream of the driver.
        neighbors: Neighbour rank per edge; defaults to ``halo.neighbors()``.
    """

    def __init__(
        self,
        tile: Tile,
        halo: HaloExchangeBase,
        open_boundary: OpenBoundaryBase | None = None,
        driver: DriverConfig | None = None,
        damping: DampingConfig | None = None,
        random_source: RandomSource | None = None,
        neighbors: Mapping[Edge, int] | None = None,
    ) -> None:
        self.tile = tile
        self.halo = halo
        self.open_boundary = open_boundary
        self.driver = driver if driver is not None else DriverConfig()
        self.damping_config = damping if damping is not None else DampingConfig()
        self.random_source = random_source
        self.neighbors = dict(neighbors if neighbors is not None else halo.neighbors())
        self.kinds: dict[Edge, BoundaryKind] = {}
        self.any_open = False
        self.damping: DampingLayer | None = None
        self._spectrum: DrivenBoundarySpectrum | None = None

    # --- setup ---

    def initialize(self, edge_kinds: Mapping[Edge | str, BoundaryKind | str]) -> None:
        """Record the kind of every edge and derive ``any_open``.

        Args:
            edge_kinds: Kind per edge, keyed by :class:`Edge` or its value.

        Raises:
            BoundaryConfigError: For an unknown edge, an unknown kind or a
                missing edge.
        """
        kinds: dict[Edge, BoundaryKind] = {}
        for key, value in edge_kinds.items():
            try:
                edge = Edge(key)
            except ValueError:
                raise BoundaryConfigError(f"unknown domain edge {key!r}") from None
            try:
                kinds[edge] = BoundaryKind(value)
            except ValueError:
                valid = ", ".join(k.value for k in BoundaryKind)
                raise BoundaryConfigError(
                    f"invalid boundary kind {value!r} on {edge.value}; expected one of {valid}"
                ) from None
        missing = [edge.value for edge in EDGES if edge not in kinds]
        if missing:
            raise BoundaryConfigError(f"no boundary kind given for {', '.join(missing)}")
        for edge in EDGES:
            if edge not in self.neighbors:
                raise BoundaryConfigError(f"no neighbour rank given for {edge.value}")

        self.kinds = kinds
        self.any_open = any(kind == BoundaryKind.OPEN for kind in kinds.values())
        self.damping = DampingLayer.from_config(
            self.tile, self.damping_config, global_edges=self.global_edges()
        )

        logger.info(
            "Boundary kinds: %s",
            ", ".join(f"{edge.value}={kinds[edge].value}" for edge in EDGES),
        )
        if self.any_open and self.open_boundary is None:
            logger.warning(
                "Open edges configured without an open-boundary routine; "
                "their ghost cells keep the halo-exchange values"
            )
        if self.driver.enabled and not self.is_driven(DRIVEN_EDGE):
            logger.warning("Driver enabled but %s is not a user-defined global edge", DRIVEN_EDGE.value)

    @property
    def initialized(self) -> bool:
        return bool(self.kinds)

    def _require_initialized(self) -> None:
        if not self.kinds:
            raise BoundaryConfigError("BoundaryConditionManager.initialize() has not been called")

    # --- edge queries ---

    def is_global_boundary(self, edge: Edge) -> bool:
        """True if ``edge`` touches the global domain boundary."""
        return self.neighbors[edge] == NO_NEIGHBOR

    def is_user_boundary(self, edge: Edge) -> bool:
        return self.is_global_boundary(edge) and self.kinds[edge] == BoundaryKind.USER

    def is_open_boundary(self, edge: Edge) -> bool:
        return self.is_global_boundary(edge) and self.kinds[edge] == BoundaryKind.OPEN

    def is_driven(self, edge: Edge) -> bool:
        return self.driver.enabled and edge == DRIVEN_EDGE and self.is_user_boundary(edge)

    def global_edges(self) -> tuple[Edge, ...]:
        return tuple(edge for edge in EDGES if self.is_global_boundary(edge))

    # --- driver ---

    @property
    def spectrum(self) -> DrivenBoundarySpectrum:
        """Driver spectrum, built on first use."""
        if self._spectrum is None:
            d = self.driver
            self._spectrum = DrivenBoundarySpectrum.build(
                num_bins=d.num_bins,
                min_omega=d.min_omega,
                max_omega=d.max_omega,
                seed=d.seed,
                num_columns=self.tile.num_columns,
                amplitude=d.amplitude,
                random_source=self.random_source,
            )
        return self._spectrum

    @property
    def spectrum_built(self) -> bool:
        return self._spectrum is not None

    # --- shared edge loop ---

    def _exchange_and_fill(
        self,
        name: str,
        f: HaloArray,
        rules: Mapping[Edge, Callable[[HaloArray, Edge], None]],
    ) -> None:
        self._require_initialized()
        self.halo.exchange(name, f)
        for edge in EDGES:
            if self.is_user_boundary(edge):
                rules[edge](f, edge)
            elif self.is_open_boundary(edge) and self.open_boundary is not None:
                self.open_boundary.apply(name, f, edge)

    def _scalar_bcs(self, name: str, f: HaloArray) -> None:
        self._exchange_and_fill(name, f, {edge: zero_gradient for edge in EDGES})

    # --- magnetic field ---

    def bfield_bcs(self, fields: FieldSet) -> None:
        """Boundary conditions for bx, by and bz."""
        bx_rules = {edge: mirror_normal if edge in _X_EDGES else zero_gradient for edge in EDGES}
        by_rules = {edge: zero_gradient if edge in _X_EDGES else mirror_normal for edge in EDGES}
        self._exchange_and_fill("bx", fields.bx, bx_rules)
        self._exchange_and_fill("by", fields.by, by_rules)
        self.bz_bcs(fields.bz)

    def bz_bcs(self, bz: HaloArray) -> None:
        """Boundary conditions for the out-of-plane field alone, used after the remap."""
        self._scalar_bcs("bz", bz)

    # --- thermodynamic fields ---

    def energy_bcs(self, energy: HaloArray) -> None:
        self._scalar_bcs("energy", energy)

    def density_bcs(self, rho: HaloArray) -> None:
        self._scalar_bcs("rho", rho)

    def temperature_bcs(self, temperature: HaloArray) -> None:
        self._scalar_bcs("temperature", temperature)

    # --- velocity ---

    def _velocity_bcs(
        self,
        names: tuple[str, str, str],
        components: tuple[HaloArray, HaloArray, HaloArray],
        time: float,
    ) -> None:
        self._require_initialized()
        for name, f in zip(names, components):
            self.halo.exchange(name, f)
        vx, vy, vz = components
        for edge in EDGES:
            if self.is_user_boundary(edge):
                no_slip(vx, edge)
                no_slip(vy, edge)
                if self.is_driven(edge):
                    vz[wall_layers(vz, edge)] = self.spectrum.evaluate(
                        time, self.driver.rise_time
                    )[:, None]
                else:
                    no_slip(vz, edge)
            elif self.is_open_boundary(edge) and self.open_boundary is not None:
                for name, f in zip(names, components):
                    self.open_boundary.apply(name, f, edge)

    def velocity_bcs(self, fields: FieldSet, time: float) -> None:
        """Full-step velocity boundary conditions, driver evaluated at ``time``."""
        self._velocity_bcs(("vx", "vy", "vz"), (fields.vx, fields.vy, fields.vz), time)

    def remap_v_bcs(self, fields: FieldSet, time: float, dt: float) -> None:
        """Half-step velocity boundary conditions, driver evaluated at ``time - dt/2``."""
        self._velocity_bcs(
            ("vx1", "vy1", "vz1"), (fields.vx1, fields.vy1, fields.vz1), time - 0.5 * dt
        )

    # --- damping ---

    def damp_boundaries(self, fields: FieldSet, dt: float) -> None:
        self._require_initialized()
        self.damping.apply((fields.vx, fields.vy, fields.vz), dt)

    # --- all fields ---

    def apply(self, fields: FieldSet, time: float, dt: float) -> None:
        """Fill the halo of every field for one step.

        Args:
            fields: Fields of this tile, modified in place.
            time: Simulation time at the end of the full step.
            dt: Timestep.
        """
        self.bfield_bcs(fields)
        self.energy_bcs(fields.energy)
        self.density_bcs(fields.rho)
        self.temperature_bcs(fields.temperature)
        self.velocity_bcs(fields, time)
        self.remap_v_bcs(fields, time, dt)
        self.damp_boundaries(fields, dt)
        logger.debug("Applied boundary conditions at t=%.6e", time)
