"""Deterministic multi-tone waveform for driving one boundary.

The driver is a sum of ``num_bins`` sine waves with angular frequencies
spaced uniformly in ``[min_omega, max_omega]``, random phases drawn once
from a seeded stream, and a Kolmogorov-like amplitude law

    A(omega) = A0 * omega^(-5/6)

Evaluation is a pure function of time, so a restarted run reproduces the
same boundary signal:

    v(t) = envelope(t) * sum_k A_k * sin(omega_k * t + phi_k)
    envelope(t) = 0.5 * (1 - cos(pi * t / t_rise))   for t < t_rise, else 1

The tables are stored per column of the driven edge, shape
``(num_columns, num_bins)``, but every column of a bin holds the same phase
and amplitude, so all columns evaluate to the same value.
"""

from __future__ import annotations

import logging

import numpy as np

from mhdcore import constants
from mhdcore.constants import pi
from mhdcore.core.bases import RandomSource, SeededRandomSource
from mhdcore.errors import DriverConfigError

logger = logging.getLogger(__name__)


def startup_envelope(time: float, rise_time: float) -> float:
    """Smooth cosine ramp from 0 at ``t=0`` to 1 at ``t=rise_time``."""
    if time < rise_time:
        return 0.5 * (1.0 - np.cos(time * pi / rise_time))
    return 1.0


class DrivenBoundarySpectrum:
    """Immutable table of frequency bins and its evaluation.

    Use :meth:`build` to construct.

    Attributes:
        omega: Angular frequency per bin, shape ``(num_bins,)``.
        phase: Phase per column and bin, shape ``(num_columns, num_bins)``.
        amplitude: Amplitude per column and bin, same shape as ``phase``.
    """

    def __init__(self, omega: np.ndarray, phase: np.ndarray, amplitude: np.ndarray) -> None:
        if phase.shape != amplitude.shape or phase.shape[1] != omega.shape[0]:
            raise DriverConfigError(
                f"inconsistent spectrum tables: omega {omega.shape}, "
                f"phase {phase.shape}, amplitude {amplitude.shape}"
            )
        self.omega = omega
        self.phase = phase
        self.amplitude = amplitude
        for table in (self.omega, self.phase, self.amplitude):
            table.setflags(write=False)

    @classmethod
    def build(
        cls,
        num_bins: int = constants.DRIVER_NUM_BINS,
        min_omega: float = constants.DRIVER_MIN_OMEGA,
        max_omega: float = constants.DRIVER_MAX_OMEGA,
        seed: int = constants.DRIVER_SEED,
        num_columns: int = 1,
        amplitude: float = constants.DRIVER_AMPLITUDE,
        random_source: RandomSource | None = None,
    ) -> DrivenBoundarySpectrum:
        """Build the bin table.

        Args:
            num_bins: Number of frequency bins (at least 2).
            min_omega: Lowest angular frequency (positive).
            max_omega: Highest angular frequency.
            seed: Seed of the default phase stream.
            num_columns: Columns of the driven edge, halo included.
            amplitude: A0 of the power law.
            random_source: Replaces the seeded default stream.  One deviate
                is drawn per bin, in bin order.

        Returns:
            The spectrum.
        """
        if num_bins < 2:
            raise DriverConfigError(f"num_bins must be at least 2, got {num_bins}")
        if min_omega <= 0.0:
            raise DriverConfigError(f"min_omega must be positive, got {min_omega}")
        if max_omega < min_omega:
            raise DriverConfigError(f"max_omega {max_omega} is below min_omega {min_omega}")
        if num_columns < 1:
            raise DriverConfigError(f"num_columns must be positive, got {num_columns}")

        source = random_source if random_source is not None else SeededRandomSource(seed)

        omega = np.empty(num_bins)
        phase = np.empty((num_columns, num_bins))
        amp = np.empty((num_columns, num_bins))
        for k in range(num_bins):
            omega[k] = k / (num_bins - 1) * (max_omega - min_omega) + min_omega
            phase[:, k] = source.uniform() * 2.0 * pi
            amp[:, k] = amplitude * omega[k] ** constants.DRIVER_SPECTRAL_INDEX

        logger.info(
            "Built driver spectrum: %d bins, omega in [%.3g, %.3g], seed %d",
            num_bins, min_omega, max_omega, seed,
        )
        return cls(omega, phase, amp)

    @property
    def num_bins(self) -> int:
        return self.omega.shape[0]

    @property
    def num_columns(self) -> int:
        return self.phase.shape[0]

    def unramped(self, time: float) -> np.ndarray:
        """Sum of the tones at ``time`` without the start-up envelope."""
        return np.sum(self.amplitude * np.sin(self.omega * time + self.phase), axis=1)

    def evaluate(self, time: float, rise_time: float = constants.DRIVER_RISE_TIME) -> np.ndarray:
        """Driver value of every column at ``time``.

        Args:
            time: Simulation time.
            rise_time: Duration of the cosine start-up ramp.

        Returns:
            Array of shape ``(num_columns,)``.
        """
        return self.unramped(time) * startup_envelope(time, rise_time)
