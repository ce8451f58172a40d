"""Tape-style delay effect with parameters, wet/dry mix and output metering."""

from __future__ import annotations

from typing import List, MutableSequence, Sequence

from .delay import Delay
from .meter import Meter
from .parameters import ParameterInfo, ParameterManager
from .ramp import Ramp

ID_ENABLED = "enabled"
ID_MIX = "mix"
ID_TIME = "time"
ID_FEEDBACK = "feedback"
ID_WOW = "wow"
ID_TONE = "tone"
ID_DISTORTION = "distortion"

TIME_MIN = 1.0
TIME_MAX = 2500.0

PARAMETERS = (
    ParameterInfo.boolean(ID_ENABLED, "Enabled", "Off", "On", True),
    ParameterInfo.float_param(ID_MIX, "Mix", "ms", 0.5, 0.0, 1.0, 0.001, 1.0),
    ParameterInfo.float_param(ID_TIME, "Time", "ms", 500.0, TIME_MIN, TIME_MAX, 0.01, 0.5),
    ParameterInfo.float_param(ID_FEEDBACK, "Feedback", "", 0.5, 0.0, 1.0, 0.001, 1.0),
    ParameterInfo.float_param(ID_WOW, "Wow", "", 0.5, 0.0, 1.0, 0.001, 1.0),
    ParameterInfo.float_param(ID_TONE, "Tone", "Hz", 5000.0, 200.0, 20000.0, 1.0, 0.4),
    ParameterInfo.float_param(ID_DISTORTION, "Distortion", "dB", 3.0, 0.0, 36.0, 0.01, 0.75),
)


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


class DelayProcessor:
    """Stereo delay processor driven by a :class:`ParameterManager`."""

    MAX_DELAY_SIZE_SAMPLES = 1 << 12
    MAX_CHANNELS = 2
    MAX_PROCESS_BLOCK_SAMPLES = 32

    def __init__(self) -> None:
        self._params = ParameterManager("Delay", PARAMETERS)
        self._delay = Delay(TIME_MAX, 2)
        self._wet = Ramp(0.05)
        self._dry = Ramp(0.05)
        self._meter = Meter()
        self._meter.set_time_constant(150.0)

        self._enabled = 1.0
        self._mix = 0.5
        self._samples_per_block = 0
        self._num_channels = 0
        self._prepared = False

        self._params.register_parameter_callback(ID_ENABLED, self._on_enabled)
        self._params.register_parameter_callback(ID_MIX, self._on_mix)
        self._params.register_parameter_callback(
            ID_TIME, lambda value, force: self._delay.set_delay_time(value))
        self._params.register_parameter_callback(
            ID_FEEDBACK, lambda value, force: self._delay.set_feedback(value))
        self._params.register_parameter_callback(
            ID_WOW, lambda value, force: self._delay.set_wow(value))
        self._params.register_parameter_callback(
            ID_TONE, lambda value, force: self._delay.set_tone_frequency(value))
        self._params.register_parameter_callback(
            ID_DISTORTION, lambda value, force: self._delay.set_distortion(value))

    @property
    def parameter_manager(self) -> ParameterManager:
        """Parameters of the processor."""
        return self._params

    @property
    def meter(self) -> Meter:
        """Meter following the wet delay signal."""
        return self._meter

    def _update_mix(self, force: bool) -> None:
        self._wet.set_target(_clamp01(self._enabled * self._mix), force)
        self._dry.set_target(
            _clamp01((1.0 - self._mix) * self._enabled + (1.0 - self._enabled)), force)

    def _on_enabled(self, value: float, force: bool) -> None:
        self._enabled = value
        self._update_mix(force)

    def _on_mix(self, value: float, force: bool) -> None:
        self._mix = value
        self._update_mix(force)

    def prepare_to_play(self, sample_rate: float, samples_per_block: int, num_channels: int) -> None:
        """Prepare for playback and push every parameter to the DSP."""
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        if samples_per_block < 0:
            raise ValueError("samples_per_block must not be negative")
        if not 1 <= num_channels <= self.MAX_CHANNELS:
            raise ValueError(f"num_channels must be between 1 and {self.MAX_CHANNELS}")
        self._delay.prepare(sample_rate, TIME_MAX, num_channels)
        self._wet.prepare(sample_rate)
        self._dry.prepare(sample_rate)
        self._meter.prepare(sample_rate, num_channels)
        self._params.update_parameters(True)
        self._samples_per_block = samples_per_block
        self._num_channels = num_channels
        self._prepared = True

    def release_resources(self) -> None:
        """Clear the delay memory."""
        self._delay.clear()

    def process_block(self, buffer: MutableSequence[List[float]]) -> None:
        """Process ``buffer`` in place, one list of samples per channel."""
        if not self._prepared:
            raise RuntimeError("prepare_to_play must be called before process_block")
        if len(buffer) > self._num_channels:
            raise ValueError("buffer has more channels than were prepared")
        lengths = {len(channel) for channel in buffer}
        if len(lengths) > 1:
            raise ValueError("all channels must have the same number of samples")
        if lengths and lengths.pop() > self._samples_per_block:
            raise ValueError("buffer has more samples than were prepared")

        self._params.update_parameters()

        fx = self._delay.process([list(channel) for channel in buffer])
        self._meter.process(fx)
        fx = self._wet.apply_gain(fx)
        dry = self._dry.apply_gain([list(channel) for channel in buffer])

        for channel, d, w in zip(buffer, dry, fx):
            channel[:] = [a + b for a, b in zip(d, w)]

    def get_state_information(self) -> bytes:
        """Serialise the parameter state."""
        return self._params.get_state_information()

    def set_state_information(self, data: Sequence[int]) -> None:
        """Restore the parameter state; changes apply on the next block."""
        self._params.set_state_information(bytes(data))