"""Linear parameter ramp for click-free value changes."""

from __future__ import annotations

import math
from typing import List, Sequence


class Ramp:
    """Linearly moves a value towards a target over a fixed ramp time."""

    DEFAULT_RAMP_TIME = 0.05
    MIN_RAMP_TIME = 1e-3
    MIN_DELTA = 1e-9

    def __init__(self, ramp_time_sec: float = DEFAULT_RAMP_TIME) -> None:
        self._ramp_time = max(ramp_time_sec, self.MIN_RAMP_TIME)
        self._sample_rate = 48000.0
        self._step = 0.0
        self._target = 0.0
        self._current = 0.0

    @property
    def current(self) -> float:
        """The value most recently produced."""
        return self._current

    @property
    def target(self) -> float:
        """The value the ramp is heading towards."""
        return self._target

    @property
    def ramp_time(self) -> float:
        """The ramp time in seconds."""
        return self._ramp_time

    def prepare(
        self,
        sample_rate: float,
        skip_ramp: bool = False,
        skip_to_value: float = 0.0,
    ) -> None:
        """Set a new sample rate, optionally jumping straight to a value."""
        self._sample_rate = sample_rate
        if skip_ramp:
            self.set_target(skip_to_value, True)
        else:
            self.set_target(self._target)

    def set_target(self, target: float, skip_ramp: bool = False) -> None:
        """Set the value to ramp to, or jump to it when ``skip_ramp`` is set."""
        delta = target - self._current
        if abs(delta) > self.MIN_DELTA:
            self._target = target
            duration = self._sample_rate * self._ramp_time
            if duration != 0.0:
                self._step = delta / duration
            else:
                self._step = math.copysign(math.inf, delta)

        if skip_ramp:
            self._current = self._target = target

    def set_ramp_time(self, ramp_time_sec: float) -> None:
        """Set a new ramp time in seconds; takes effect on the next target."""
        self._ramp_time = max(ramp_time_sec, 0.0)

    def next_value(self) -> float:
        """Advance the ramp by one sample and return its value."""
        remaining = abs(self._target - self._current)
        if remaining > abs(2.0 * self._step) and abs(self._step) > self.MIN_DELTA:
            self._current += self._step
        else:
            self._current = self._target
        return self._current

    def apply_sum_frame(self, frame: Sequence[float]) -> List[float]:
        """Advance one sample and add the ramp value to every channel."""
        value = self.next_value()
        return [x + value for x in frame]

    def apply_gain_frame(self, frame: Sequence[float]) -> List[float]:
        """Advance one sample and scale every channel by the ramp value."""
        value = self.next_value()
        return [x * value for x in frame]

    def apply_sum(self, buffers: Sequence[Sequence[float]]) -> List[List[float]]:
        """Add the ramp to each channel of a block, sample by sample."""
        frames = [self.apply_sum_frame(frame) for frame in zip(*buffers)]
        return _to_channels(frames, len(buffers))

    def apply_gain(self, buffers: Sequence[Sequence[float]]) -> List[List[float]]:
        """Scale each channel of a block by the ramp, sample by sample."""
        frames = [self.apply_gain_frame(frame) for frame in zip(*buffers)]
        return _to_channels(frames, len(buffers))


def _to_channels(frames: List[List[float]], num_channels: int) -> List[List[float]]:
    if not frames:
        return [[] for _ in range(num_channels)]
    return [list(channel) for channel in zip(*frames)]