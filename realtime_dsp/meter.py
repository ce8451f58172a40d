"""Peak envelope follower for level metering."""

from __future__ import annotations

import math
from typing import Sequence, Tuple


class Meter:
    """Instant-attack, exponential-release peak meter for up to two channels.

    The envelope is kept as an immutable tuple and replaced as a whole, so a
    reader on another thread always sees a consistent pair of values.
    """

    MAX_NUM_CHANNELS = 2
    MIN_RELEASE_MS = 1.0
    MAX_RELEASE_MS = 1000.0

    def __init__(self) -> None:
        self._sample_rate = 48000.0
        self._num_channels = 0
        self._release_ms = 250.0
        self._envelope: Tuple[float, ...] = (0.0,) * self.MAX_NUM_CHANNELS
        self._coeff = 1.0

    @property
    def num_channels(self) -> int:
        """Number of channels set by :meth:`prepare`."""
        return self._num_channels

    @property
    def release_time_ms(self) -> float:
        """Release time constant in milliseconds."""
        return self._release_ms

    def prepare(self, sample_rate: float, num_channels: int) -> None:
        """Set the sample rate and channel count and reset the envelope."""
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        self._sample_rate = float(sample_rate)
        self._num_channels = max(min(int(num_channels), self.MAX_NUM_CHANNELS), 0)
        self._update_coeff()
        self._envelope = (0.0,) * self.MAX_NUM_CHANNELS

    def process(self, inputs: Sequence[Sequence[float]]) -> None:
        """Feed a block of audio, one sequence per channel."""
        self._check_channels(len(inputs))
        envelope = list(self._envelope)
        for ch, channel in enumerate(inputs):
            env = envelope[ch]
            for sample in channel:
                env = self._follow(env, sample)
            envelope[ch] = env
        self._envelope = tuple(envelope)

    def process_frame(self, frame: Sequence[float]) -> None:
        """Feed one sample of each channel."""
        self._check_channels(len(frame))
        envelope = list(self._envelope)
        for ch, sample in enumerate(frame):
            envelope[ch] = self._follow(envelope[ch], sample)
        self._envelope = tuple(envelope)

    def set_time_constant(self, release_ms: float) -> None:
        """Set the release time in ms, clamped to 1..1000."""
        self._release_ms = min(max(release_ms, self.MIN_RELEASE_MS), self.MAX_RELEASE_MS)
        self._update_coeff()

    def envelope(self, channel: int) -> float:
        """Current envelope of a channel; out-of-range channels are clamped."""
        index = min(max(int(channel), 0), self.MAX_NUM_CHANNELS - 1)
        return self._envelope[index]

    def _follow(self, env: float, sample: float) -> float:
        x = abs(sample)
        coeff = 0.0 if x > env else self._coeff
        return (env - x) * coeff + x

    def _update_coeff(self) -> None:
        self._coeff = math.exp(-1.0 / (self._sample_rate * 0.001 * self._release_ms))

    def _check_channels(self, count: int) -> None:
        if count > self.MAX_NUM_CHANNELS:
            raise ValueError(f"at most {self.MAX_NUM_CHANNELS} channels are supported")