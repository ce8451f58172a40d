"""Stereo ring modulator with quadrature LFOs."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import List, Sequence

_TWO_PI = 2.0 * math.pi


class ModType(IntEnum):
    """Modulator waveform."""

    SIN = 0
    TRI = 1
    SQR = 2


class RingMod:
    """Multiplies each channel by an LFO; right runs a quarter cycle ahead."""

    MAX_CHANNELS = 2

    def __init__(self) -> None:
        self._sample_rate = 48000.0
        self._mod_rate = 0.0
        self._mod_type = ModType.SIN
        self._phase = [0.0, 0.0]
        self._phase_inc = 0.0

    @property
    def mod_rate(self) -> float:
        """Modulation rate in Hz."""
        return self._mod_rate

    @property
    def mod_type(self) -> ModType:
        """Modulator waveform."""
        return self._mod_type

    def prepare(self, sample_rate: float) -> None:
        """Set a new sample rate and reset the LFO phases."""
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        self._sample_rate = float(sample_rate)
        self._phase = [0.0, math.pi / 2.0]
        self._phase_inc = _TWO_PI / self._sample_rate * self._mod_rate

    def process(self, inputs: Sequence[Sequence[float]]) -> List[List[float]]:
        """Modulate a block; only the first two channels are processed."""
        channels = list(inputs[: self.MAX_CHANNELS])
        if len({len(channel) for channel in channels}) > 1:
            raise ValueError("all channels must have the same number of samples")
        outputs: List[List[float]] = [[] for _ in channels]
        for frame in zip(*channels):
            lfo = [self._lfo(p) for p in self._phase]
            self._phase = [math.fmod(p + self._phase_inc, _TWO_PI) for p in self._phase]
            for out, x, m in zip(outputs, frame, lfo):
                out.append(m * x)
        return outputs

    def set_mod_rate(self, rate_hz: float) -> None:
        """Set the modulation rate in Hz (not below zero)."""
        self._mod_rate = max(rate_hz, 0.0)
        self._phase_inc = _TWO_PI / self._sample_rate * self._mod_rate

    def set_mod_type(self, mod_type: ModType) -> None:
        """Select the waveform; values past square select square."""
        value = int(mod_type)
        if value < 0:
            raise ValueError("mod_type must not be negative")
        self._mod_type = ModType(min(value, ModType.SQR))

    def _lfo(self, phase: float) -> float:
        if self._mod_type is ModType.SIN:
            return math.sin(phase)
        if self._mod_type is ModType.TRI:
            return 2.0 * abs((phase - math.pi) / math.pi) - 1.0
        return math.copysign(1.0, phase - math.pi)