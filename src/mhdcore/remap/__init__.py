"""Conservative remap of the out-of-plane magnetic field."""

from mhdcore.remap.zremap import (
    MagneticRemap,
    face_fluxes,
    remap_bz_increment,
    remap_bz_inplace,
)

__all__ = [
    "MagneticRemap",
    "face_fluxes",
    "remap_bz_increment",
    "remap_bz_inplace",
]
