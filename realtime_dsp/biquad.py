"""Cascade of second-order IIR sections over several channels."""

from __future__ import annotations

from typing import List, Sequence, Tuple

Coefficients = Tuple[float, float, float, float, float]


class Biquad:
    """Direct form I biquad cascade.

    Each section holds ``(b0, b1, b2, a1, a2)`` with ``a0`` normalised to one.
    """

    COEFFS_PER_SECTION = 5
    STATES_PER_SECTION = 4

    def __init__(self, num_sections: int = 0, max_num_channels: int = 0) -> None:
        _check_count(num_sections, "num_sections")
        _check_count(max_num_channels, "max_num_channels")
        self._coeffs: List[List[float]] = []
        self._states: List[List[List[float]]] = []
        self._num_channels = max_num_channels
        self.reallocate_sections(num_sections)

    @property
    def allocated_channels(self) -> int:
        """Number of channels that have state storage."""
        return len(self._states)

    @property
    def allocated_sections(self) -> int:
        """Number of cascaded sections."""
        return len(self._coeffs)

    @property
    def coefficients(self) -> Tuple[Coefficients, ...]:
        """Current coefficients of every section."""
        return tuple(tuple(section) for section in self._coeffs)  # type: ignore[misc]

    def clear(self) -> None:
        """Reset all filter states to zero."""
        for channel in self._states:
            for section in channel:
                section[:] = [0.0] * self.STATES_PER_SECTION

    def reallocate_channels(self, max_num_channels: int) -> None:
        """Resize state storage for a new channel count; states are cleared."""
        _check_count(max_num_channels, "max_num_channels")
        self._num_channels = max_num_channels
        self._states = self._fresh_states()

    def reallocate_sections(self, num_sections: int) -> None:
        """Resize coefficient and state storage; both are cleared."""
        _check_count(num_sections, "num_sections")
        self._coeffs = [[0.0] * self.COEFFS_PER_SECTION for _ in range(num_sections)]
        self._states = self._fresh_states()

    def set_section_coeffs(self, coeffs: Sequence[float], section: int) -> None:
        """Replace the coefficients of one section; unknown sections are ignored."""
        if len(coeffs) != self.COEFFS_PER_SECTION:
            raise ValueError(
                f"expected {self.COEFFS_PER_SECTION} coefficients, got {len(coeffs)}"
            )
        if 0 <= section < len(self._coeffs):
            self._coeffs[section] = [float(c) for c in coeffs]

    def process(self, inputs: Sequence[Sequence[float]]) -> List[List[float]]:
        """Filter a block; channels beyond the allocated count are dropped."""
        return [
            [self._tick(states, x) for x in channel]
            for states, channel in zip(self._states, inputs)
        ]

    def process_frame(self, frame: Sequence[float]) -> List[float]:
        """Filter a single sample of each channel."""
        return [self._tick(states, x) for states, x in zip(self._states, frame)]

    def _fresh_states(self) -> List[List[List[float]]]:
        return [
            [[0.0] * self.STATES_PER_SECTION for _ in self._coeffs]
            for _ in range(self._num_channels)
        ]

    def _tick(self, channel_states: List[List[float]], x: float) -> float:
        for (b0, b1, b2, a1, a2), st in zip(self._coeffs, channel_states):
            acc = x * b0
            acc += b1 * st[0]
            acc += b2 * st[1]
            acc -= a1 * st[2]
            acc -= a2 * st[3]
            st[1] = st[0]
            st[0] = x
            st[3] = st[2]
            st[2] = acc
            x = acc
        return x


def _check_count(value: int, name: str) -> None:
    if value < 0:
        raise ValueError(f"{name} must not be negative")