"""Numerical constants shared by the boundary and remap modules.

Mathematical constants come from ``scipy.constants``.
Import from here instead of defining local constants.
"""

import scipy.constants as _sc

# Mathematical
pi = _sc.pi

# Grid
NG = 2                          # Halo depth on every side of a tile
NO_NEIGHBOR = -1                # Neighbour rank of an edge on the global boundary

# Driven boundary spectrum
DRIVER_NUM_BINS = 1000
DRIVER_MIN_OMEGA = 0.01
DRIVER_MAX_OMEGA = 10.0
DRIVER_SEED = 76783467
DRIVER_AMPLITUDE = 1.0e-4       # A0 in A0 * omega^(-5/6)
DRIVER_SPECTRAL_INDEX = -2.5 / 3.0
DRIVER_RISE_TIME = 1.0

# Damping layer
DAMPING_N_CELLS = 20.0
DAMPING_SCALE = 1.0
