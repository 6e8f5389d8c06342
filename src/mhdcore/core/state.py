"""Field set and simulation context threaded through every boundary and remap call."""

from __future__ import annotations

from dataclasses import dataclass, fields

from mhdcore.core.grid import HaloArray, Tile

SCALAR_FIELDS = ("rho", "energy", "temperature")
VELOCITY_FIELDS = ("vx", "vy", "vz")
HALF_STEP_VELOCITY_FIELDS = ("vx1", "vy1", "vz1")
MAGNETIC_FIELDS = ("bx", "by", "bz")


@dataclass
class FieldSet:
    """All physical fields of one tile.

    Attributes:
        rho: Density (cell centred).
        energy: Specific internal energy (cell centred).
        temperature: Temperature (cell centred).
        vx, vy, vz: Velocity (vertex centred).
        vx1, vy1, vz1: Half-step predictor velocity (vertex centred).
        bx: Magnetic field x-component on x-faces.
        by: Magnetic field y-component on y-faces.
        bz: Out-of-plane component, co-located with the velocity grid.
    """

    rho: HaloArray
    energy: HaloArray
    temperature: HaloArray
    vx: HaloArray
    vy: HaloArray
    vz: HaloArray
    vx1: HaloArray
    vy1: HaloArray
    vz1: HaloArray
    bx: HaloArray
    by: HaloArray
    bz: HaloArray

    @classmethod
    def allocate(cls, tile: Tile) -> FieldSet:
        """Allocate every field as zeros over the tile including its halo."""
        return cls(**{f.name: tile.new_field() for f in fields(cls)})

    def get(self, name: str) -> HaloArray:
        return getattr(self, name)

    def names(self) -> tuple[str, ...]:
        return tuple(f.name for f in fields(self))

    def copy(self) -> FieldSet:
        return FieldSet(**{name: self.get(name).copy() for name in self.names()})


@dataclass
class SimulationState:
    """Explicit simulation context.

    Attributes:
        tile: Geometry of this process's subdomain.
        fields: Physical fields of the tile.
        time: Current simulation time (end of the full step).
        dt: Current timestep.
        step: Completed step count.
    """

    tile: Tile
    fields: FieldSet
    time: float = 0.0
    dt: float = 0.0
    step: int = 0

    @classmethod
    def create(cls, tile: Tile, time: float = 0.0, dt: float = 0.0) -> SimulationState:
        return cls(tile=tile, fields=FieldSet.allocate(tile), time=time, dt=dt)

    @property
    def half_time(self) -> float:
        """Time at which the half-step predictor velocity is centred."""
        return self.time - 0.5 * self.dt

    def advance(self, dt: float) -> None:
        self.dt = dt
        self.time += dt
        self.step += 1
