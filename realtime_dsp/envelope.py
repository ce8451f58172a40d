"""ADSR envelope generator with digital (linear) and analog (exponential) modes."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import List


class EnvelopeState(IntEnum):
    """Stage the envelope is currently in."""

    OFF = 0
    ATTACK = 1
    DECAY = 2
    SUSTAIN = 3
    RELEASE = 4


class EnvelopeGenerator:
    """Attack, decay, sustain, release envelope.

    In digital style each stage reaches its goal in exactly the configured
    number of samples. In analog style each stage is a leaky integrator that
    moves on once it is within ``DELTA`` of its goal.
    """

    DELTA = 1e-3
    MIN_TIME_MS = 0.1

    def __init__(self) -> None:
        self._sample_rate = 48000.0
        self._attack_ms = 10.0
        self._decay_ms = 5.0
        self._release_ms = 50.0
        self._sustain = 1.0

        self._attack_samples = 0
        self._decay_samples = 0
        self._release_samples = 0

        self._attack_counter = 0
        self._decay_counter = 0
        self._release_counter = 0

        self._envelope = 0.0

        self._attack_coeff = 0.0
        self._decay_coeff = 0.0
        self._release_coeff = 0.0

        self._analog = False
        self._state = EnvelopeState.OFF

    @property
    def state(self) -> EnvelopeState:
        """Current stage."""
        return self._state

    @property
    def current(self) -> float:
        """Most recently produced envelope value."""
        return self._envelope

    @property
    def analog_style(self) -> bool:
        """Whether the exponential (analog) mode is active."""
        return self._analog

    @property
    def attack_time_ms(self) -> float:
        """Attack time in milliseconds."""
        return self._attack_ms

    @property
    def decay_time_ms(self) -> float:
        """Decay time in milliseconds."""
        return self._decay_ms

    @property
    def release_time_ms(self) -> float:
        """Release time in milliseconds."""
        return self._release_ms

    @property
    def sustain_level(self) -> float:
        """Sustain level, linear 0..1."""
        return self._sustain

    def prepare(self, sample_rate: float) -> None:
        """Set a new sample rate, recompute the stage times and switch off."""
        self._sample_rate = float(sample_rate)
        self._recompute_times()
        self._state = EnvelopeState.OFF
        self._reset_counters()

    def process(self, num_samples: int) -> List[float]:
        """Produce ``num_samples`` envelope values."""
        if num_samples < 0:
            raise ValueError("num_samples must not be negative")
        step = self._analog_step if self._analog else self._digital_step
        return [step() for _ in range(num_samples)]

    def start(self) -> None:
        """Begin the attack stage (note on)."""
        self._state = EnvelopeState.ATTACK
        self._reset_counters()

    def end(self) -> None:
        """Begin the release stage (note off)."""
        self._state = EnvelopeState.RELEASE
        self._reset_counters()

    def is_off(self) -> bool:
        """True once the envelope has fully released."""
        return self._state is EnvelopeState.OFF

    def set_analog_style(self, analog: bool) -> None:
        """Switch between analog and digital style; stage counters restart."""
        self._analog = bool(analog)
        self._recompute_times()
        self._reset_counters()

    def set_attack_time(self, attack_ms: float) -> None:
        """Set the attack time in ms (at least 0.1 ms)."""
        self._attack_ms = max(attack_ms, self.MIN_TIME_MS)
        self._attack_samples = self._to_samples(self._attack_ms)
        self._attack_coeff = _leaky_coeff(self._attack_samples)
        if self._state is EnvelopeState.ATTACK:
            self._attack_counter = _clamp_counter(self._attack_samples, self._attack_counter)

    def set_decay_time(self, decay_ms: float) -> None:
        """Set the decay time in ms (at least 0.1 ms)."""
        self._decay_ms = max(decay_ms, self.MIN_TIME_MS)
        self._decay_samples = self._to_samples(self._decay_ms)
        self._decay_coeff = _leaky_coeff(self._decay_samples)
        if self._state is EnvelopeState.DECAY:
            self._decay_counter = _clamp_counter(self._decay_samples, self._decay_counter)

    def set_sustain_level(self, level: float) -> None:
        """Set the sustain level, clamped to 0..1."""
        self._sustain = min(max(level, 0.0), 1.0)

    def set_release_time(self, release_ms: float) -> None:
        """Set the release time in ms (at least 0.1 ms)."""
        self._release_ms = max(release_ms, self.MIN_TIME_MS)
        self._release_samples = self._to_samples(self._release_ms)
        self._release_coeff = _leaky_coeff(self._release_samples)
        if self._state is EnvelopeState.RELEASE:
            self._release_counter = _clamp_counter(self._release_samples, self._release_counter)

    def _to_samples(self, ms: float) -> int:
        return int(round(ms * self._sample_rate * 0.001))

    def _recompute_times(self) -> None:
        self._attack_samples = self._to_samples(self._attack_ms)
        self._decay_samples = self._to_samples(self._decay_ms)
        self._release_samples = self._to_samples(self._release_ms)
        self._attack_coeff = _leaky_coeff(self._attack_samples)
        self._decay_coeff = _leaky_coeff(self._decay_samples)
        self._release_coeff = _leaky_coeff(self._release_samples)

    def _reset_counters(self) -> None:
        self._attack_counter = 0
        self._decay_counter = 0
        self._release_counter = 0

    def _digital_step(self) -> float:
        state = self._state
        if state is EnvelopeState.OFF:
            self._envelope = 0.0
        elif state is EnvelopeState.ATTACK:
            if self._attack_counter < self._attack_samples:
                remaining = max(float(self._attack_samples - self._attack_counter), 1.0)
                self._envelope += (1.0 - self._envelope) / remaining
                self._envelope = min(self._envelope, 1.0)
                self._attack_counter += 1
            else:
                self._attack_counter = 0
                self._state = EnvelopeState.DECAY
        elif state is EnvelopeState.DECAY:
            if self._decay_counter < self._decay_samples:
                remaining = max(float(self._decay_samples - self._decay_counter), 1.0)
                self._envelope += (self._sustain - self._envelope) / remaining
                self._decay_counter += 1
            else:
                self._decay_counter = 0
                self._state = EnvelopeState.SUSTAIN
        elif state is EnvelopeState.SUSTAIN:
            self._envelope = self._sustain
        elif state is EnvelopeState.RELEASE:
            if self._release_counter < self._release_samples:
                remaining = max(float(self._release_samples - self._release_counter), 1.0)
                self._envelope += (0.0 - self._envelope) / remaining
                self._release_counter += 1
            else:
                self._release_counter = 0
                self._state = EnvelopeState.OFF
        return self._envelope

    def _analog_step(self) -> float:
        state = self._state
        if state is EnvelopeState.OFF:
            self._envelope = 0.0
        elif state is EnvelopeState.ATTACK:
            if abs(self._envelope - 1.0) > self.DELTA:
                self._envelope = (self._envelope - 1.1) * self._attack_coeff + 1.1
                self._envelope = min(self._envelope, 1.0)
            else:
                self._envelope = 1.0
                self._state = EnvelopeState.DECAY
        elif state is EnvelopeState.DECAY:
            if abs(self._envelope - self._sustain) > self.DELTA:
                self._envelope = (self._envelope - self._sustain) * self._decay_coeff + self._sustain
            else:
                self._envelope = self._sustain
                self._state = EnvelopeState.SUSTAIN
        elif state is EnvelopeState.SUSTAIN:
            self._envelope = self._sustain
        elif state is EnvelopeState.RELEASE:
            if abs(self._envelope) > self.DELTA:
                self._envelope = self._envelope * self._release_coeff
            else:
                self._envelope = 0.0
                self._state = EnvelopeState.OFF
        return self._envelope


def _leaky_coeff(samples: int) -> float:
    return math.exp(-1.0 / samples) if samples > 0 else 0.0


def _clamp_counter(time_samples: int, counter: int) -> int:
    if time_samples == 0:
        return counter
    return min(time_samples - 1, counter)