"""Boundary conditions and out-of-plane magnetic field remap for 2D Lagrangian-remap MHD."""

__version__ = "0.1.0"
