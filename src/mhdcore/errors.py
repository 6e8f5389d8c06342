"""Exception hierarchy.

Only setup code raises these. The per-step kernels never check for
overflow or NaN; such values propagate to later diagnostics.
"""

from __future__ import annotations


class MHDCoreError(Exception):
    """Base class for all mhdcore errors."""


class GridError(MHDCoreError, ValueError):
    """Invalid tile geometry (size, halo depth, extents)."""


class BoundaryConfigError(MHDCoreError, ValueError):
    """Illegal boundary-condition configuration, detected before the step loop."""


class DriverConfigError(MHDCoreError, ValueError):
    """Invalid parameters for the driven boundary spectrum."""
