"""Simple oscillator voice with a gain ramp acting as the amplifier."""

from __future__ import annotations

from typing import List, MutableSequence

from .oscillator import Oscillator, OscType
from .ramp import Ramp


def convert_midi_note_to_freq(midi_note: int) -> float:
    """Convert a MIDI note number to Hz with A4 (note 69) at 440 Hz."""
    return 440.0 * 2.0 ** ((midi_note - 69) / 12.0)


class SynthVoice:
    """One oscillator shaped by an attack/release ramp."""

    def __init__(self) -> None:
        self._host_sample_rate = 48000.0
        self._sample_rate = 48000.0
        self._osc = Oscillator()
        self._ramp = Ramp()

    @property
    def sample_rate(self) -> float:
        """Sample rate the voice is currently prepared for."""
        return self._sample_rate

    def set_sample_rate(self, sample_rate: float) -> None:
        """Set the rate to render at; applied on the next block."""
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        self._host_sample_rate = float(sample_rate)

    def set_wave_type(self, osc_type: OscType) -> None:
        """Select the oscillator waveform."""
        self._osc.set_type(osc_type)

    def set_att_rel_time(self, time_ms: float) -> None:
        """Set the attack and release time in milliseconds."""
        self._ramp.set_ramp_time(time_ms * 0.001)

    def start_note(self, midi_note: int, velocity: float) -> None:
        """Ramp up to ``velocity`` at the pitch of ``midi_note``."""
        self._ramp.set_target(velocity)
        self._osc.set_frequency(convert_midi_note_to_freq(midi_note))

    def stop_note(self, velocity: float = 0.0, allow_tail_off: bool = True) -> None:
        """Ramp down to silence."""
        self._ramp.set_target(0.0)

    def render_next_block(
        self,
        output: MutableSequence[List[float]],
        start_sample: int,
        num_samples: int,
    ) -> None:
        """Write ``num_samples`` samples into ``output`` from ``start_sample``.

        The first channel is overwritten and copied to the second, if any.
        """
        if not output:
            raise ValueError("output must have at least one channel")
        if start_sample < 0 or num_samples < 0:
            raise ValueError("start_sample and num_samples must not be negative")
        end = start_sample + num_samples
        if any(len(channel) < end for channel in output[:2]):
            raise ValueError("output is too short for the requested block")

        if self._host_sample_rate != self._sample_rate:
            self._sample_rate = self._host_sample_rate
            self._osc.prepare(self._sample_rate)
            self._ramp.prepare(self._sample_rate)

        block = self._ramp.apply_gain([self._osc.process(num_samples)])[0]
        output[0][start_sample:end] = block
        if len(output) > 1:
            output[1][start_sample:end] = list(block)