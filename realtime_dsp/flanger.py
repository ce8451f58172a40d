"""Flanger built on a modulated delay line."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import List, Sequence

from .delay_line import DelayLine
from .ramp import Ramp

_TWO_PI = 2.0 * math.pi


class ModulationType(IntEnum):
    """LFO waveform driving the delay time."""

    SIN = 0
    TRI = 1


class Flanger:
    """Stereo flanger with quadrature LFOs; supports at most two channels."""

    MAX_CHANNELS = 2

    def __init__(self, max_time_ms: float, num_channels: int) -> None:
        self._sample_rate = 48000.0
        length = math.ceil(max(max_time_ms, 1.0) * 0.001 * self._sample_rate)
        self._delay_line = DelayLine(length, num_channels)
        self._offset_ramp = Ramp(0.05)
        self._depth_ramp = Ramp(0.05)
        self._phase = [0.0, 0.0]
        self._phase_inc = 0.0
        self._offset_ms = 0.0
        self._depth_ms = 0.0
        self._mod_rate = 0.0
        self._mod_type = ModulationType.SIN

    @property
    def offset_ms(self) -> float:
        """Modulated delay offset on top of the fixed 1 ms delay."""
        return self._offset_ms

    @property
    def depth_ms(self) -> float:
        """Modulation depth in milliseconds."""
        return self._depth_ms

    @property
    def modulation_rate(self) -> float:
        """LFO rate in Hz."""
        return self._mod_rate

    @property
    def modulation_type(self) -> ModulationType:
        """LFO waveform."""
        return self._mod_type

    def prepare(self, sample_rate: float, max_time_ms: float, num_channels: int) -> None:
        """Set the sample rate and reallocate the buffer.

        The buffer is always allocated for two channels, whatever
        ``num_channels`` says.
        """
        self._sample_rate = float(sample_rate)
        sr = self._sample_rate

        self._delay_line.prepare(_round(max_time_ms * 0.001 * sr), self.MAX_CHANNELS)
        self._delay_line.set_delay_samples(math.ceil(0.001 * sr))

        self._offset_ramp.prepare(sr, True, self._offset_ms * 0.001 * sr)
        self._depth_ramp.prepare(sr, True, self._depth_ms * 0.001 * sr)

        self._phase = [0.0, math.pi / 2.0]
        self._phase_inc = _TWO_PI / sr * self._mod_rate

    def clear(self) -> None:
        """Clear the delay buffer."""
        self._delay_line.clear()

    def process(self, inputs: Sequence[Sequence[float]]) -> List[List[float]]:
        """Process a block of audio, one sequence per channel."""
        num_channels = len(inputs)
        if num_channels > self.MAX_CHANNELS:
            raise ValueError(f"at most {self.MAX_CHANNELS} channels are supported")
        if len({len(channel) for channel in inputs}) > 1:
            raise ValueError("all channels must have the same number of samples")

        outputs: List[List[float]] = [[] for _ in range(num_channels)]
        for frame in zip(*inputs):
            if self._mod_type is ModulationType.TRI:
                lfo = [abs((p - math.pi) / math.pi) for p in self._phase]
            else:
                lfo = [0.5 + 0.5 * math.sin(p) for p in self._phase]
            self._phase = [math.fmod(p + self._phase_inc, _TWO_PI) for p in self._phase]

            lfo = self._depth_ramp.apply_gain_frame(lfo[:num_channels])
            lfo = self._offset_ramp.apply_sum_frame(lfo)

            delayed = self._delay_line.process_modulated_frame(list(frame), lfo)
            delayed += [0.0] * (num_channels - len(delayed))

            for out, y in zip(outputs, delayed):
                out.append(y)
        return outputs

    def set_offset(self, offset_ms: float) -> None:
        """Set the total delay offset in ms; the fixed 1 ms is taken off."""
        self._offset_ms = max(offset_ms - 1.0, 0.0)
        self._offset_ramp.set_target(self._offset_ms * 0.001 * self._sample_rate)

    def set_depth(self, depth_ms: float) -> None:
        """Set the modulation depth in ms."""
        self._depth_ms = max(depth_ms, 0.0)
        self._depth_ramp.set_target(self._depth_ms * 0.001 * self._sample_rate)

    def set_modulation_rate(self, rate_hz: float) -> None:
        """Set the LFO rate in Hz."""
        self._mod_rate = max(rate_hz, 0.0)
        self._phase_inc = _TWO_PI / self._sample_rate * self._mod_rate

    def set_modulation_type(self, mod_type: ModulationType) -> None:
        """Select the LFO waveform."""
        self._mod_type = ModulationType(mod_type)


def _round(value: float) -> int:
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))