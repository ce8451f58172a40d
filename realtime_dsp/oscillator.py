"""Audio oscillator with aliased and DPW anti-aliased waveforms."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import List


class OscType(IntEnum):
    """Oscillator waveform."""

    SIN = 0
    TRI_ALIASED = 1
    SAW_ALIASED = 2
    TRI_AA = 3
    SAW_AA = 4


class Oscillator:
    """Phase-accumulator oscillator; phase runs from 0 to 1."""

    MIN_FREQUENCY = 0.1
    MAX_FREQUENCY = 10000.0

    def __init__(self) -> None:
        self._sample_rate = 48000.0
        self._frequency = 1.0
        self._type = OscType.SIN
        self._phase = 0.0
        self._phase_inc = 0.0
        self._diff_state = 0.0
        self._diff_coeff = 0.0

    @property
    def frequency(self) -> float:
        """Frequency in Hz."""
        return self._frequency

    @property
    def type(self) -> OscType:
        """Selected waveform."""
        return self._type

    def prepare(self, sample_rate: float) -> None:
        """Set a new sample rate and reset the phase."""
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        self._sample_rate = float(sample_rate)
        self._update_increments()
        self._phase = 0.0
        self._diff_state = 0.0

    def process(self, num_samples: int) -> List[float]:
        """Produce ``num_samples`` samples."""
        if num_samples < 0:
            raise ValueError("num_samples must not be negative")
        return [self.next_sample() for _ in range(num_samples)]

    def next_sample(self) -> float:
        """Produce one sample and advance the phase."""
        osc_type = self._type
        p = self._phase
        if osc_type is OscType.SIN:
            value = math.sin(2.0 * math.pi * p)
        elif osc_type is OscType.TRI_ALIASED:
            value = 4.0 * abs(p - 0.5) - 1.0
        elif osc_type is OscType.SAW_ALIASED:
            value = 2.0 * p - 1.0
        elif osc_type is OscType.TRI_AA:
            value = self._dpw_tri()
        else:
            value = self._dpw_saw()
        self._phase = math.fmod(p + self._phase_inc, 1.0)
        return value

    def set_frequency(self, frequency: float) -> None:
        """Set the frequency in Hz, clamped to 0.1..10000."""
        self._frequency = min(max(frequency, self.MIN_FREQUENCY), self.MAX_FREQUENCY)
        self._update_increments()

    def set_type(self, osc_type: OscType) -> None:
        """Select the waveform; the phase restarts."""
        self._type = OscType(osc_type)
        self._phase = 0.0
        self._diff_state = 0.0

    def _update_increments(self) -> None:
        sr = self._sample_rate
        f = self._frequency
        self._phase_inc = f / sr
        denom = 4.0 * f * (1.0 - f / sr)
        self._diff_coeff = sr / denom if denom else math.inf

    def _dpw_saw(self) -> float:
        bipolar = 2.0 * self._phase - 1.0
        squared = bipolar * bipolar
        out = squared - self._diff_state
        self._diff_state = squared
        return out * self._diff_coeff

    def _dpw_tri(self) -> float:
        bipolar = 2.0 * self._phase - 1.0
        offset = 1.0 - bipolar * bipolar
        square = math.copysign(1.0, bipolar) * offset
        out = min(square - self._diff_state, 0.0)
        self._diff_state = square
        return 2.0 * (out * self._diff_coeff) + 1.0