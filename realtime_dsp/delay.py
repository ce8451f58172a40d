"""Tape-style delay with wow, feedback, saturation and a tone filter."""

from __future__ import annotations

import math
from typing import List, Sequence

from .delay_line import DelayLine
from .parametric_equalizer import FilterType, ParametricEqualizer
from .ramp import Ramp

_TWO_PI = 2.0 * math.pi


class Delay:
    """Stereo feedback delay; supports at most two channels."""

    WOW_FREQ_HZ = 2.0
    WOW_DEPTH_MAX = 0.002
    MAX_CHANNELS = 2

    def __init__(self, max_time_ms: float, num_channels: int) -> None:
        self._sample_rate = 48000.0
        length = math.ceil(max(max_time_ms, 1.0) * 0.001 * self._sample_rate)
        self._delay_line = DelayLine(length, num_channels)
        self._filter = ParametricEqualizer(1)

        self._pre_distortion_ramp = Ramp(0.02)
        self._post_distortion_ramp = Ramp(0.02)
        self._time_ramp = Ramp(0.5)
        self._wow_ramp = Ramp(0.02)
        self._feedback_ramp = Ramp(0.02)

        self._feedback_state = [0.0, 0.0]
        self._phase = [0.0, 0.0]
        self._phase_inc = 0.0

        self._delay_time_ms = 0.0
        self._feedback = 0.0
        self._wow = 0.0
        self._tone_frequency = 5000.0
        self._distortion = 0.0

    @property
    def delay_time_ms(self) -> float:
        """Delay time in milliseconds."""
        return self._delay_time_ms

    @property
    def feedback(self) -> float:
        """Normalised feedback amount."""
        return self._feedback

    @property
    def wow(self) -> float:
        """Normalised wow depth."""
        return self._wow

    @property
    def tone_frequency(self) -> float:
        """Tone filter cutoff in Hz."""
        return self._tone_frequency

    @property
    def distortion(self) -> float:
        """Drive in dB."""
        return self._distortion

    def prepare(self, sample_rate: float, max_time_ms: float, num_channels: int) -> None:
        """Set the sample rate, reallocate the buffers and clear all state."""
        self._sample_rate = float(sample_rate)
        sr = self._sample_rate

        self._delay_line.prepare(_round(max_time_ms * 0.001 * sr), self.MAX_CHANNELS)
        self._delay_line.set_delay_samples(1)

        self._filter.set_band_type(0, FilterType.LOW_PASS)
        self._filter.set_band_resonance(0, math.sqrt(0.5))
        self._filter.set_band_frequency(0, self._tone_frequency)
        self._filter.prepare(sr, num_channels)

        distortion_lin = 10.0 ** (0.05 * self._distortion)
        self._pre_distortion_ramp.prepare(sr, True, distortion_lin)
        self._post_distortion_ramp.prepare(sr, True, 2.0 / distortion_lin)
        self._time_ramp.prepare(sr, True, self._delay_time_ms * sr * 0.001)
        self._wow_ramp.prepare(sr, True, self._wow * self.WOW_DEPTH_MAX * sr)
        self._feedback_ramp.prepare(sr, True, self._feedback * 0.98)

        self._phase = [0.0, math.pi / 2.0]
        self._phase_inc = _TWO_PI / sr * self.WOW_FREQ_HZ

        self.clear()

    def clear(self) -> None:
        """Clear the delay buffer, the filter and the feedback path."""
        self._delay_line.clear()
        self._filter.clear()
        self._feedback_state = [0.0, 0.0]

    def process(self, inputs: Sequence[Sequence[float]]) -> List[List[float]]:
        """Process a block of audio, one sequence per channel."""
        num_channels = len(inputs)
        if num_channels > self.MAX_CHANNELS:
            raise ValueError(f"at most {self.MAX_CHANNELS} channels are supported")
        if len({len(channel) for channel in inputs}) > 1:
            raise ValueError("all channels must have the same number of samples")

        outputs: List[List[float]] = [[] for _ in range(num_channels)]
        for frame in zip(*inputs):
            lfo = [(0.5 + 0.5 * math.sin(p)) ** 2 for p in self._phase][:num_channels]
            self._phase = [math.fmod(p + self._phase_inc, _TWO_PI) for p in self._phase]

            lfo = self._wow_ramp.apply_gain_frame(lfo)
            lfo = self._time_ramp.apply_sum_frame(lfo)

            feedback = self._feedback_ramp.apply_gain_frame(
                self._feedback_state[:num_channels]
            )
            self._feedback_state[:num_channels] = feedback

            delay_in = [x + fb for x, fb in zip(frame, feedback)]
            driven = self._pre_distortion_ramp.apply_gain_frame(delay_in)
            shaped = self._post_distortion_ramp.apply_gain_frame(
                [math.tanh(x) for x in driven]
            )

            filtered = self._filter.process_frame(shaped)
            filtered += [0.0] * (num_channels - len(filtered))

            delayed = self._delay_line.process_modulated_frame(filtered, lfo)
            self._feedback_state[: len(delayed)] = delayed

            for out, y in zip(outputs, self._feedback_state):
                out.append(y)
        return outputs

    def set_delay_time(self, delay_ms: float) -> None:
        """Set the delay time in milliseconds (at least 1 ms)."""
        self._delay_time_ms = max(delay_ms, 1.0)
        self._time_ramp.set_target(self._delay_time_ms * self._sample_rate * 0.001)

    def set_wow(self, wow: float) -> None:
        """Set the tape wow depth, normalised to 0..1."""
        self._wow = min(max(wow, 0.0), 1.0)
        self._wow_ramp.set_target(self._wow * self.WOW_DEPTH_MAX * self._sample_rate)

    def set_feedback(self, feedback: float) -> None:
        """Set the feedback amount, normalised to 0..1."""
        self._feedback = min(max(feedback, 0.0), 1.0)
        self._feedback_ramp.set_target(self._feedback * 0.98)

    def set_tone_frequency(self, frequency: float) -> None:
        """Set the tone filter cutoff in Hz, clamped to 20..20000."""
        self._tone_frequency = min(max(frequency, 20.0), 20000.0)
        self._filter.set_band_frequency(0, self._tone_frequency)

    def set_distortion(self, distortion_db: float) -> None:
        """Set the drive in dB, clamped to 0..36."""
        self._distortion = min(max(distortion_db, 0.0), 36.0)
        distortion_lin = 10.0 ** (0.05 * self._distortion)
        self._pre_distortion_ramp.set_target(distortion_lin)
        self._post_distortion_ramp.set_target(2.0 / distortion_lin)


def _round(value: float) -> int:
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))