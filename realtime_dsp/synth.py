"""Monophonic subtractive synth voice: three oscillators, VCA, VCF and LFO."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import List, MutableSequence, Optional

from .envelope import EnvelopeGenerator
from .oscillator import Oscillator, OscType
from .ramp import Ramp
from .state_variable_filter import StateVariableFilter
from .synth_voice import convert_midi_note_to_freq

_TWO_PI = 2.0 * math.pi


class LFOType(IntEnum):
    """Waveform of the filter LFO."""

    SIN = 0
    TRI = 1


class SynthFilterType(IntEnum):
    """Which state variable filter output is heard."""

    LPF = 0
    BPF = 1
    HPF = 2


def _db_to_gain(db: float) -> float:
    return 10.0 ** (0.05 * db)


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


class MonoSynthVoice:
    """Synth voice that adds its output to every channel of a buffer."""

    MAX_FREQ_HZ = 20000.0
    MIN_FREQ_HZ = 20.0
    MAX_RESO = 10.0
    MIN_RESO = 0.5
    FREQ_MOD_RANGE = 10000.0

    def __init__(self) -> None:
        self._host_sample_rate = 48000.0
        self._sample_rate = 1.0
        self._lfo_freq = 1.0
        self._velocity = 1.0

        self._sin_osc = Oscillator()
        self._tri_osc = Oscillator()
        self._saw_osc = Oscillator()
        self._saw_osc.set_type(OscType.SAW_AA)
        self._tri_osc.set_type(OscType.TRI_AA)
        self._sin_osc.set_type(OscType.SIN)

        self._vca_env = EnvelopeGenerator()
        self._vcf_env = EnvelopeGenerator()
        self._vca_env.set_analog_style(False)
        self._vcf_env.set_analog_style(False)

        self._filter = StateVariableFilter()

        self._lfo_type = LFOType.SIN
        self._lfo_phase = 0.0
        self._lfo_phase_inc = 0.0

        self._sin_vol = Ramp()
        self._tri_vol = Ramp()
        self._saw_vol = Ramp()
        self._osc_vol = Ramp()
        self._output_vol = Ramp()
        self._vcf_env_amount = Ramp()
        self._vcf_lfo_amount = Ramp()
        self._vcf_freq = Ramp()
        self._vcf_reso = Ramp()
        self._vcf_lpf = Ramp()
        self._vcf_bpf = Ramp()
        self._vcf_hpf = Ramp()

        self._voice_started = False
        self._current_note: Optional[int] = None

    @property
    def current_note(self) -> Optional[int]:
        """MIDI note being played, or None when the voice is free."""
        return self._current_note

    @property
    def is_active(self) -> bool:
        """True while a note is assigned to the voice."""
        return self._current_note is not None

    def _ramps(self) -> List[Ramp]:
        return [
            self._sin_vol, self._tri_vol, self._saw_vol, self._osc_vol,
            self._output_vol, self._vcf_env_amount, self._vcf_lfo_amount,
            self._vcf_freq, self._vcf_reso, self._vcf_lpf, self._vcf_bpf,
            self._vcf_hpf,
        ]

    def set_sample_rate(self, sample_rate: float) -> None:
        """Set the rate to render at; applied on the next block."""
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        self._host_sample_rate = float(sample_rate)

    def set_osc_saw_vol(self, db: float, skip_ramp: bool = False) -> None:
        """Saw oscillator level in dB."""
        self._saw_vol.set_target(_db_to_gain(db), skip_ramp)

    def set_osc_tri_vol(self, db: float, skip_ramp: bool = False) -> None:
        """Triangle oscillator level in dB."""
        self._tri_vol.set_target(_db_to_gain(db), skip_ramp)

    def set_osc_sin_vol(self, db: float, skip_ramp: bool = False) -> None:
        """Sine oscillator level in dB."""
        self._sin_vol.set_target(_db_to_gain(db), skip_ramp)

    def set_osc_vol(self, db: float, skip_ramp: bool = False) -> None:
        """Level of the oscillator mix in dB."""
        self._osc_vol.set_target(_db_to_gain(db), skip_ramp)

    def set_att_time_vca(self, ms: float) -> None:
        """Amplifier envelope attack in ms."""
        self._vca_env.set_attack_time(ms)

    def set_decay_time_vca(self, ms: float) -> None:
        """Amplifier envelope decay in ms."""
        self._vca_env.set_decay_time(ms)

    def set_sustain_vca(self, norm: float) -> None:
        """Amplifier envelope sustain, 0..1."""
        self._vca_env.set_sustain_level(_clamp(norm, 0.0, 1.0))

    def set_rel_time_vca(self, ms: float) -> None:
        """Amplifier envelope release in ms."""
        self._vca_env.set_release_time(ms)

    def set_att_time_vcf(self, ms: float) -> None:
        """Filter envelope attack in ms."""
        self._vcf_env.set_attack_time(ms)

    def set_decay_time_vcf(self, ms: float) -> None:
        """Filter envelope decay in ms."""
        self._vcf_env.set_decay_time(ms)

    def set_sustain_vcf(self, norm: float) -> None:
        """Filter envelope sustain, 0..1."""
        self._vcf_env.set_sustain_level(_clamp(norm, 0.0, 1.0))

    def set_rel_time_vcf(self, ms: float) -> None:
        """Filter envelope release in ms."""
        self._vcf_env.set_release_time(ms)

    def set_lfo_freq_vcf(self, hz: float) -> None:
        """Filter LFO rate in Hz."""
        self._lfo_freq = max(hz, 0.0)
        self._lfo_phase_inc = _TWO_PI / self._sample_rate * self._lfo_freq

    def set_lfo_type_vcf(self, lfo_type: LFOType) -> None:
        """Filter LFO waveform."""
        self._lfo_type = LFOType(lfo_type)

    def set_env_amount_vcf(self, bipolar: float, skip_ramp: bool = False) -> None:
        """Envelope to cutoff amount, -1..1."""
        self._vcf_env_amount.set_target(_clamp(bipolar, -1.0, 1.0), skip_ramp)

    def set_lfo_amount_vcf(self, bipolar: float, skip_ramp: bool = False) -> None:
        """LFO to cutoff amount, -1..1."""
        self._vcf_lfo_amount.set_target(_clamp(bipolar, -1.0, 1.0), skip_ramp)

    def set_filter_cutoff(self, hz: float, skip_ramp: bool = False) -> None:
        """Base filter cutoff in Hz, clamped to 20..20000."""
        self._vcf_freq.set_target(_clamp(hz, self.MIN_FREQ_HZ, self.MAX_FREQ_HZ), skip_ramp)

    def set_filter_reso(self, q: float, skip_ramp: bool = False) -> None:
        """Filter Q, clamped to 0.5..10."""
        self._vcf_reso.set_target(_clamp(q, self.MIN_RESO, self.MAX_RESO), skip_ramp)

    def set_filter_type(self, filter_type: SynthFilterType, skip_ramp: bool = False) -> None:
        """Crossfade to the selected filter output."""
        filter_type = SynthFilterType(filter_type)
        self._vcf_lpf.set_target(1.0 if filter_type is SynthFilterType.LPF else 0.0, skip_ramp)
        self._vcf_bpf.set_target(1.0 if filter_type is SynthFilterType.BPF else 0.0, skip_ramp)
        self._vcf_hpf.set_target(1.0 if filter_type is SynthFilterType.HPF else 0.0, skip_ramp)

    def set_output_vol(self, db: float, skip_ramp: bool = False) -> None:
        """Output level in dB."""
        self._output_vol.set_target(_db_to_gain(db), skip_ramp)

    def start_note(self, midi_note: int, velocity: float) -> None:
        """Tune the oscillators and trigger both envelopes."""
        freq = convert_midi_note_to_freq(midi_note)
        for osc in (self._sin_osc, self._tri_osc, self._saw_osc):
            osc.set_frequency(freq)
        self._vca_env.start()
        self._vcf_env.start()
        self._velocity = velocity
        self._voice_started = True
        self._current_note = midi_note

    def stop_note(self, velocity: float = 0.0, allow_tail_off: bool = True) -> None:
        """Release both envelopes; free the voice at once without tail-off."""
        self._vca_env.end()
        self._vcf_env.end()
        if not allow_tail_off:
            self._current_note = None

    def render_next_block(
        self,
        output: MutableSequence[List[float]],
        start_sample: int,
        num_samples: int,
    ) -> None:
        """Add ``num_samples`` samples to every channel from ``start_sample``."""
        if start_sample < 0 or num_samples < 0:
            raise ValueError("start_sample and num_samples must not be negative")
        end = start_sample + num_samples
        if any(len(channel) < end for channel in output):
            raise ValueError("output is too short for the requested block")

        if self._sample_rate != self._host_sample_rate:
            self._prepare(self._host_sample_rate)

        for i in range(num_samples):
            sin = self._sin_osc.next_sample()
            tri = self._tri_osc.next_sample()
            saw = self._saw_osc.next_sample()

            vca_env = self._vca_env.process(1)[0]
            vcf_env = self._vcf_env.process(1)[0]

            sin_vol = self._sin_vol.next_value()
            tri_vol = self._tri_vol.next_value()
            saw_vol = self._saw_vol.next_value()
            osc_vol = self._osc_vol.next_value()
            env_amount = self._vcf_env_amount.next_value()
            lfo_amount = self._vcf_lfo_amount.next_value()
            vcf_freq = self._vcf_freq.next_value()
            vcf_reso = self._vcf_reso.next_value()
            lpf = self._vcf_lpf.next_value()
            bpf = self._vcf_bpf.next_value()
            hpf = self._vcf_hpf.next_value()
            output_vol = self._output_vol.next_value()

            if self._lfo_type is LFOType.TRI:
                lfo = abs((self._lfo_phase - math.pi) / math.pi)
            else:
                lfo = 0.5 + 0.5 * math.sin(self._lfo_phase)
            self._lfo_phase = math.fmod(self._lfo_phase + self._lfo_phase_inc, _TWO_PI)

            osc_out = (sin * sin_vol + tri * tri_vol + saw * saw_vol) * osc_vol * vca_env * self._velocity
            freq_mod = _clamp(vcf_env * env_amount + lfo_amount * lfo, -1.0, 1.0)
            freq = _clamp(
                self.FREQ_MOD_RANGE * (2.0 ** freq_mod - 1.0) + vcf_freq,
                self.MIN_FREQ_HZ,
                self.MAX_FREQ_HZ,
            )
            low, band, high = self._filter.process_sample(osc_out, freq, vcf_reso)

            out = (lpf * low + bpf * band + hpf * high) * output_vol
            for channel in output:
                channel[start_sample + i] += out

            if self._voice_started and self._vca_env.is_off() and self._vcf_env.is_off():
                self._voice_started = False
                self._current_note = None

    def _prepare(self, sample_rate: float) -> None:
        self._sample_rate = sample_rate
        for osc in (self._sin_osc, self._tri_osc, self._saw_osc):
            osc.prepare(sample_rate)
        self._vca_env.prepare(sample_rate)
        self._vcf_env.prepare(sample_rate)
        self._filter.prepare(sample_rate)
        for ramp in self._ramps():
            ramp.prepare(sample_rate)
        self._lfo_phase_inc = _TWO_PI / sample_rate * max(self._lfo_freq, 0.0)