"""Boundary conditions: ghost-cell manager, spectral wave driver, damping layer."""

from mhdcore.boundary.damping import DampingLayer, attenuation_factor
from mhdcore.boundary.manager import (
    DRIVEN_EDGE,
    BoundaryConditionManager,
    mirror_normal,
    no_slip,
    zero_gradient,
)
from mhdcore.boundary.spectrum import DrivenBoundarySpectrum, startup_envelope

__all__ = [
    "DRIVEN_EDGE",
    "BoundaryConditionManager",
    "DampingLayer",
    "DrivenBoundarySpectrum",
    "attenuation_factor",
    "mirror_normal",
    "no_slip",
    "startup_envelope",
    "zero_gradient",
]
