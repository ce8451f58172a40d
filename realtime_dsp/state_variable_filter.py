"""Topology-preserving state variable filter with audio-rate controls."""

from __future__ import annotations

import math
from itertools import repeat
from typing import Iterable, List, Sequence, Tuple, Union

Control = Union[float, Sequence[float]]


class StateVariableFilter:
    """Two-integrator SVF producing low-, band- and high-pass outputs."""

    MIN_FREQUENCY = 20.0
    MAX_FREQUENCY = 20000.0
    MIN_RESONANCE = 0.1
    MAX_RESONANCE = 10.0

    def __init__(self) -> None:
        self._sample_rate = 48000.0
        self._s0 = 0.0
        self._s1 = 0.0

    @property
    def sample_rate(self) -> float:
        """Current sample rate."""
        return self._sample_rate

    def prepare(self, sample_rate: float) -> None:
        """Set a new sample rate and clear the states."""
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        self._sample_rate = float(sample_rate)
        self._s0 = 0.0
        self._s1 = 0.0

    def process(
        self, audio: Sequence[float], frequency: Control, resonance: Control
    ) -> Tuple[List[float], List[float], List[float]]:
        """Filter a block; return ``(lowpass, bandpass, highpass)``.

        ``frequency`` (Hz) and ``resonance`` (Q) are either one value for the
        whole block or one value per sample.
        """
        freqs = _control(frequency, len(audio), "frequency")
        resos = _control(resonance, len(audio), "resonance")
        lp: List[float] = []
        bp: List[float] = []
        hp: List[float] = []
        for x, f, q in zip(audio, freqs, resos):
            low, band, high = self.process_sample(x, f, q)
            lp.append(low)
            bp.append(band)
            hp.append(high)
        return lp, bp, hp

    def process_sample(
        self, x: float, frequency: float, resonance: float
    ) -> Tuple[float, float, float]:
        """Filter one sample; return ``(lowpass, bandpass, highpass)``."""
        two_r = 1.0 / min(max(resonance, self.MIN_RESONANCE), self.MAX_RESONANCE)
        fc = min(max(frequency, self.MIN_FREQUENCY), self.MAX_FREQUENCY)
        g = math.tan(math.pi / self._sample_rate * fc)
        g0 = two_r + g
        d = 1.0 / (1.0 + two_r * g + g * g)

        hp = (x - self._s1 - g0 * self._s0) * d
        v0 = g * hp
        bp = v0 + self._s0
        self._s0 = bp + v0
        v1 = g * bp
        lp = v1 + self._s1
        self._s1 = lp + v1
        return lp, bp, hp


def _control(value: Control, length: int, name: str) -> Iterable[float]:
    if isinstance(value, (int, float)):
        return repeat(float(value), length)
    if len(value) != length:
        raise ValueError(f"{name} must have one value per audio sample")
    return value