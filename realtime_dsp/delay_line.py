"""Multi-channel circular delay line with optional fractional modulation."""

from __future__ import annotations

import math
from typing import List, Sequence


class DelayLine:
    """Circular buffer delay shared by several channels.

    The fixed delay is set in whole samples. The modulated methods add a
    per-sample, possibly fractional, extra delay read with linear
    interpolation.
    """

    def __init__(self, max_length_samples: int, num_channels: int) -> None:
        self._buffers: List[List[float]] = []
        self._delay_samples = 0
        self._write_index = 0
        self.prepare(max_length_samples, num_channels)

    @property
    def delay_samples(self) -> int:
        """Current fixed delay in samples."""
        return self._delay_samples

    @property
    def num_channels(self) -> int:
        """Number of allocated channels."""
        return len(self._buffers)

    @property
    def length(self) -> int:
        """Buffer length in samples."""
        return len(self._buffers[0]) if self._buffers else 0

    def clear(self) -> None:
        """Zero the contents of every channel buffer."""
        for buffer in self._buffers:
            buffer[:] = [0.0] * len(buffer)

    def prepare(self, max_length_samples: int, num_channels: int) -> None:
        """Reallocate the buffers for a new length and channel count."""
        if max_length_samples < 0:
            raise ValueError("max_length_samples must not be negative")
        if num_channels < 0:
            raise ValueError("num_channels must not be negative")
        self._buffers = [[0.0] * int(max_length_samples) for _ in range(num_channels)]
        self._write_index = 0

    def set_delay_samples(self, samples: int) -> None:
        """Set the fixed delay, clamped to between 1 and the buffer length minus 1."""
        size = self._size()
        self._delay_samples = max(min(int(samples), size - 1), 1)

    def process(self, inputs: Sequence[Sequence[float]]) -> List[List[float]]:
        """Delay a block by the fixed delay; extra input channels are dropped."""
        size = self._size()
        num_samples = _block_length(inputs)
        outputs = []
        for buffer, channel in zip(self._buffers, inputs):
            write = self._write_index
            read = (write - self._delay_samples) % size
            out = []
            for x in channel:
                out.append(buffer[read])
                buffer[write] = x
                write = (write + 1) % size
                read = (read + 1) % size
            outputs.append(out)
        self._write_index = (self._write_index + num_samples) % size
        return outputs

    def process_frame(self, frame: Sequence[float]) -> List[float]:
        """Delay one sample of each channel by the fixed delay."""
        size = self._size()
        write = self._write_index
        read = (write - self._delay_samples) % size
        out = []
        for buffer, x in zip(self._buffers, frame):
            out.append(buffer[read])
            buffer[write] = x
        self._write_index = (write + 1) % size
        return out

    def process_modulated(
        self,
        inputs: Sequence[Sequence[float]],
        modulation: Sequence[Sequence[float]],
    ) -> List[List[float]]:
        """Delay a block by the fixed delay plus a per-sample extra delay.

        Negative modulation values are treated as zero.
        """
        size = self._size()
        num_samples = _block_length(inputs)
        active = min(len(inputs), len(self._buffers))
        _check_modulation(modulation, active, num_samples)
        outputs = []
        for buffer, channel, mods in zip(self._buffers, inputs, modulation):
            write = self._write_index
            read = (write - self._delay_samples) % size
            out = []
            for x, m in zip(channel, mods):
                out.append(_read_interpolated(buffer, read, m, size))
                buffer[write] = x
                write = (write + 1) % size
                read = (read + 1) % size
            outputs.append(out)
        self._write_index = (self._write_index + num_samples) % size
        return outputs

    def process_modulated_frame(
        self, frame: Sequence[float], modulation: Sequence[float]
    ) -> List[float]:
        """Single-sample form of :meth:`process_modulated`."""
        size = self._size()
        active = min(len(frame), len(self._buffers))
        if len(modulation) < active:
            raise ValueError("modulation must have a value for every processed channel")
        write = self._write_index
        read = (write - self._delay_samples) % size
        out = []
        for buffer, x, m in zip(self._buffers, frame, modulation):
            out.append(_read_interpolated(buffer, read, m, size))
            buffer[write] = x
        self._write_index = (write + 1) % size
        return out

    def _size(self) -> int:
        if not self._buffers:
            raise ValueError("delay line has no channels")
        size = len(self._buffers[0])
        if size == 0:
            raise ValueError("delay line has zero length")
        return size


def _read_interpolated(buffer: List[float], read: int, mod: float, size: int) -> float:
    m = max(mod, 0.0)
    m_floor = math.floor(m)
    frac = m - m_floor
    index0 = (read - int(m_floor)) % size
    index1 = (index0 - 1) % size
    return buffer[index0] * (1.0 - frac) + buffer[index1] * frac


def _block_length(channels: Sequence[Sequence[float]]) -> int:
    lengths = {len(channel) for channel in channels}
    if len(lengths) > 1:
        raise ValueError("all channels must have the same number of samples")
    return lengths.pop() if lengths else 0


def _check_modulation(
    modulation: Sequence[Sequence[float]], active: int, num_samples: int
) -> None:
    if len(modulation) < active:
        raise ValueError("modulation must have a signal for every processed channel")
    for mods in modulation[:active]:
        if len(mods) != num_samples:
            raise ValueError("modulation length must match the audio block length")