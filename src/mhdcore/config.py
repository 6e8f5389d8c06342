"""Pydantic v2 configuration for the boundary and remap core.

Provides validated, typed configuration with submodels for the grid, the
per-edge boundary kinds, the driven boundary and the damping layer.
Supports JSON I/O and cross-field validation.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from mhdcore import constants


class BoundaryKind(str, Enum):
    """Boundary treatment of one domain edge."""

    PERIODIC = "periodic"
    OPEN = "open"
    USER = "user"


class Edge(str, Enum):
    """Domain edges, in the fixed order boundaries are processed."""

    X_MIN = "x_min"
    X_MAX = "x_max"
    Y_MIN = "y_min"
    Y_MAX = "y_max"


EDGES: tuple[Edge, ...] = (Edge.X_MIN, Edge.X_MAX, Edge.Y_MIN, Edge.Y_MAX)


class GridConfig(BaseModel):
    """Tile size and physical extents."""

    nx: int = Field(256, gt=0, description="Cells along x")
    ny: int = Field(256, gt=0, description="Cells along y")
    x_min: float = Field(0.0, description="Lower x extent")
    x_max: float = Field(100.0, description="Upper x extent")
    y_min: float = Field(-20.0, description="Lower y extent")
    y_max: float = Field(80.0, description="Upper y extent")

    @model_validator(mode="after")
    def check_extents(self) -> GridConfig:
        if self.x_max <= self.x_min:
            raise ValueError("x_max must be greater than x_min")
        if self.y_max <= self.y_min:
            raise ValueError("y_max must be greater than y_min")
        return self


class BoundaryConditionsConfig(BaseModel):
    """Boundary kind on each of the four domain edges."""

    x_min: BoundaryKind = Field(BoundaryKind.PERIODIC, description="Lower x edge")
    x_max: BoundaryKind = Field(BoundaryKind.PERIODIC, description="Upper x edge")
    y_min: BoundaryKind = Field(BoundaryKind.USER, description="Lower y edge")
    y_max: BoundaryKind = Field(BoundaryKind.USER, description="Upper y edge")

    @model_validator(mode="after")
    def check_periodic_pairs(self) -> BoundaryConditionsConfig:
        for lo, hi in (("x_min", "x_max"), ("y_min", "y_max")):
            lo_periodic = getattr(self, lo) == BoundaryKind.PERIODIC
            hi_periodic = getattr(self, hi) == BoundaryKind.PERIODIC
            if lo_periodic != hi_periodic:
                raise ValueError(f"{lo} and {hi} must both be periodic or neither")
        return self

    def as_mapping(self) -> dict[Edge, BoundaryKind]:
        """Return the kinds keyed by :class:`Edge`."""
        return {edge: getattr(self, edge.value) for edge in EDGES}

    @property
    def any_open(self) -> bool:
        return any(kind == BoundaryKind.OPEN for kind in self.as_mapping().values())


class DriverConfig(BaseModel):
    """Spectral wave driver on the lower-y edge."""

    enabled: bool = Field(False, description="Drive vz on the lower-y edge")
    num_bins: int = Field(constants.DRIVER_NUM_BINS, ge=2, description="Frequency bins")
    min_omega: float = Field(constants.DRIVER_MIN_OMEGA, gt=0, description="Lowest angular frequency")
    max_omega: float = Field(constants.DRIVER_MAX_OMEGA, gt=0, description="Highest angular frequency")
    seed: int = Field(constants.DRIVER_SEED, description="Seed of the phase generator")
    amplitude: float = Field(
        constants.DRIVER_AMPLITUDE, ge=0, description="A0 in A0 * omega^(-5/6)"
    )
    rise_time: float = Field(
        constants.DRIVER_RISE_TIME, gt=0, description="Duration of the cosine start-up ramp"
    )

    @model_validator(mode="after")
    def check_band(self) -> DriverConfig:
        if self.max_omega < self.min_omega:
            raise ValueError("max_omega must not be less than min_omega")
        return self


class DampingConfig(BaseModel):
    """Velocity damping layer near the global domain edges."""

    enabled: bool = Field(False, description="Damp velocity near global edges")
    n_cells: float = Field(constants.DAMPING_N_CELLS, gt=0, description="Layer depth in cells")
    damp_scale: float = Field(constants.DAMPING_SCALE, ge=0, description="Damping strength")


class CoreConfig(BaseModel):
    """Top-level configuration of the boundary and remap core."""

    grid: GridConfig = Field(default_factory=GridConfig)
    boundaries: BoundaryConditionsConfig = Field(default_factory=BoundaryConditionsConfig)
    driver: DriverConfig = Field(default_factory=DriverConfig)
    damping: DampingConfig = Field(default_factory=DampingConfig)

    @model_validator(mode="after")
    def check_driven_edge(self) -> CoreConfig:
        if self.driver.enabled and self.boundaries.y_min != BoundaryKind.USER:
            raise ValueError("driver requires a user-defined y_min boundary")
        return self

    # --- I/O helpers ---

    @classmethod
    def from_file(cls, path: str | Path) -> CoreConfig:
        """Load configuration from a JSON file."""
        path = Path(path)
        with path.open() as f:
            data = json.load(f)
        return cls(**data)

    def to_json(self, path: str | Path | None = None) -> str:
        """Serialize to JSON string, optionally writing to file."""
        out = self.model_dump_json(indent=2)
        if path is not None:
            Path(path).write_text(out)
        return out
