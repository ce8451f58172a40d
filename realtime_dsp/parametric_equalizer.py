"""Multi-band parametric equaliser built on a biquad cascade."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Sequence, Tuple

from .biquad import Biquad, Coefficients


class FilterType(IntEnum):
    """Response of a single equaliser band."""

    FLAT = 0
    HIGH_PASS = 1
    LOW_SHELF = 2
    PEAK = 3
    LOW_PASS = 4
    HIGH_SHELF = 5


@dataclass
class Band:
    """Settings of one equaliser band."""

    type: FilterType = FilterType.FLAT
    freq: float = 1000.0
    reso: float = 0.7071
    gain: float = 0.0


class ParametricEqualizer:
    """Fixed number of bands; every band starts out flat."""

    def __init__(self, num_bands: int, max_num_channels: int = 2) -> None:
        self._biquad = Biquad(num_bands, max_num_channels)
        self._sample_rate = 48000.0
        self._bands = [Band() for _ in range(num_bands)]
        self._update_all()

    @property
    def sample_rate(self) -> float:
        """Sample rate the coefficients are computed for."""
        return self._sample_rate

    @property
    def bands(self) -> Tuple[Band, ...]:
        """Copies of the current band settings."""
        return tuple(dataclasses.replace(band) for band in self._bands)

    @property
    def coefficients(self) -> Tuple[Coefficients, ...]:
        """Current biquad coefficients of every band."""
        return self._biquad.coefficients

    def clear(self) -> None:
        """Reset filter states."""
        self._biquad.clear()

    def prepare(self, sample_rate: float, max_num_channels: int) -> None:
        """Reallocate channels, clear states and recompute coefficients."""
        self._biquad.reallocate_channels(max_num_channels)
        self._sample_rate = max(float(sample_rate), 1.0)
        self._update_all()

    def process(self, inputs: Sequence[Sequence[float]]) -> List[List[float]]:
        """Filter a block of audio, one sequence per channel."""
        return self._biquad.process(inputs)

    def process_frame(self, frame: Sequence[float]) -> List[float]:
        """Filter one sample of each channel."""
        return self._biquad.process_frame(frame)

    def set_band_type(self, band: int, filter_type: FilterType) -> None:
        """Set the response type of a band; unknown bands are ignored."""
        if self._valid(band):
            self._bands[band].type = FilterType(filter_type)
            self._update(band)

    def set_band_frequency(self, band: int, frequency: float) -> None:
        """Set a band's frequency in Hz (at least 2 Hz)."""
        if self._valid(band):
            self._bands[band].freq = max(frequency, 2.0)
            self._update(band)

    def set_band_resonance(self, band: int, resonance: float) -> None:
        """Set a band's Q factor (at least 0.1)."""
        if self._valid(band):
            self._bands[band].reso = max(resonance, 0.1)
            self._update(band)

    def set_band_gain(self, band: int, gain: float) -> None:
        """Set a band's gain in dB."""
        if self._valid(band):
            self._bands[band].gain = gain
            self._update(band)

    def _valid(self, band: int) -> bool:
        return 0 <= band < len(self._bands) and band < self._biquad.allocated_sections

    def _update(self, index: int) -> None:
        self._biquad.set_section_coeffs(
            _calculate_coeffs(self._bands[index], self._sample_rate), index
        )

    def _update_all(self) -> None:
        for index in range(len(self._bands)):
            self._update(index)


def _calculate_coeffs(band: Band, sample_rate: float) -> Coefficients:
    if band.type is FilterType.HIGH_PASS:
        n = math.tan(math.pi * band.freq / sample_rate)
        n_sq = n * n
        inv_q = 1.0 / band.reso
        c1 = 1.0 / (1.0 + inv_q * n + n_sq)
        return (c1, c1 * -2.0, c1, c1 * 2.0 * (n_sq - 1.0), c1 * (1.0 - inv_q * n + n_sq))

    if band.type is FilterType.LOW_PASS:
        n = 1.0 / math.tan(math.pi * band.freq / sample_rate)
        n_sq = n * n
        inv_q = 1.0 / band.reso
        c1 = 1.0 / (1.0 + inv_q * n + n_sq)
        return (c1, c1 * 2.0, c1, c1 * 2.0 * (1.0 - n_sq), c1 * (1.0 - inv_q * n + n_sq))

    if band.type is FilterType.PEAK:
        a = math.sqrt(10.0 ** (band.gain * 0.05))
        omega = 2.0 * math.pi * band.freq / sample_rate
        alpha = math.sin(omega) / (band.reso * 2.0)
        c2 = -2.0 * math.cos(omega)
        alpha_times_a = alpha * a
        alpha_over_a = alpha / a
        a0 = 1.0 / (1.0 + alpha_over_a)
        return (
            (1.0 + alpha_times_a) * a0,
            c2 * a0,
            (1.0 - alpha_times_a) * a0,
            c2 * a0,
            (1.0 - alpha_over_a) * a0,
        )

    if band.type in (FilterType.LOW_SHELF, FilterType.HIGH_SHELF):
        a = math.sqrt(10.0 ** (band.gain * 0.05))
        am1 = a - 1.0
        ap1 = a + 1.0
        omega = 2.0 * math.pi * band.freq / sample_rate
        coso = math.cos(omega)
        beta = math.sin(omega) * math.sqrt(a) / band.reso
        am1_coso = am1 * coso
        if band.type is FilterType.LOW_SHELF:
            a0 = 1.0 / (ap1 + am1_coso + beta)
            return (
                a * (ap1 - am1_coso + beta) * a0,
                a * 2.0 * (am1 - ap1 * coso) * a0,
                a * (ap1 - am1_coso - beta) * a0,
                -2.0 * (am1 + ap1 * coso) * a0,
                (ap1 + am1_coso - beta) * a0,
            )
        a0 = 1.0 / (ap1 - am1_coso + beta)
        return (
            a * (ap1 + am1_coso + beta) * a0,
            a * -2.0 * (am1 + ap1 * coso) * a0,
            a * (ap1 + am1_coso - beta) * a0,
            2.0 * (am1 - ap1 * coso) * a0,
            (ap1 - am1_coso - beta) * a0,
        )

    return (1.0, 0.0, 0.0, 0.0, 0.0)