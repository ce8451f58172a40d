"""Parameter descriptions, a bounded change queue and a callback manager."""

from __future__ import annotations

import json
import math
from collections import deque
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Deque, Dict, Optional, Sequence, Tuple

Callback = Callable[[float, bool], None]


class ParameterType(IntEnum):
    """Kind of value a parameter holds."""

    FLOAT = 0
    CHOICE = 1
    BOOL = 2


@dataclass(frozen=True)
class ParameterInfo:
    """Immutable description of one parameter."""

    param_id: str
    name: str
    type: ParameterType
    default: float
    minimum: float
    maximum: float
    increment: float = 1.0
    skew: float = 1.0
    unit: str = ""
    steps: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", ParameterType(self.type))
        object.__setattr__(self, "steps", tuple(self.steps))
        if not self.param_id:
            raise ValueError("parameter id must not be empty")
        if self.type is ParameterType.BOOL:
            return
        if not self.minimum < self.maximum:
            raise ValueError(f"{self.param_id}: minimum must be below maximum")
        if not self.minimum <= self.default <= self.maximum:
            raise ValueError(f"{self.param_id}: default is out of range")
        if self.type is ParameterType.CHOICE:
            if self.steps and len(self.steps) != int(self.maximum + 1.0):
                raise ValueError(f"{self.param_id}: step names do not match the range")
            return
        if self.increment <= 0.0:
            raise ValueError(f"{self.param_id}: increment must be positive")
        if self.skew <= 0.0:
            raise ValueError(f"{self.param_id}: skew must be positive")

    @classmethod
    def float_param(
        cls,
        param_id: str,
        name: str,
        unit: str,
        default: float,
        minimum: float,
        maximum: float,
        increment: float,
        skew: float,
    ) -> "ParameterInfo":
        """Describe a continuous parameter."""
        return cls(
            param_id=param_id,
            name=name,
            type=ParameterType.FLOAT,
            default=float(default),
            minimum=float(minimum),
            maximum=float(maximum),
            increment=float(increment),
            skew=float(skew),
            unit=unit,
        )

    @classmethod
    def choice(
        cls, param_id: str, name: str, steps: Sequence[str], default: int
    ) -> "ParameterInfo":
        """Describe a parameter that selects one of ``steps`` by index."""
        return cls(
            param_id=param_id,
            name=name,
            type=ParameterType.CHOICE,
            default=float(default),
            minimum=0.0,
            maximum=float(len(steps) - 1),
            steps=tuple(steps),
        )

    @classmethod
    def boolean(
        cls, param_id: str, name: str, off_name: str, on_name: str, default: bool
    ) -> "ParameterInfo":
        """Describe an on/off parameter with names for both states."""
        return cls(
            param_id=param_id,
            name=name,
            type=ParameterType.BOOL,
            default=float(bool(default)),
            minimum=0.0,
            maximum=1.0,
            steps=(off_name, on_name),
        )


class ParameterFIFO:
    """Bounded first-in first-out queue of ``(param_id, value)`` changes.

    Like a ring buffer that keeps one slot free, it holds at most
    ``capacity - 1`` entries.
    """

    def __init__(self, capacity: int = 64) -> None:
        if capacity < 1:
            raise ValueError("capacity should be at least 1")
        self._capacity = capacity
        self._queue: Deque[Tuple[str, float]] = deque()

    @property
    def capacity(self) -> int:
        """Size the queue was created with."""
        return self._capacity

    def __len__(self) -> int:
        return len(self._queue)

    def clear(self) -> None:
        """Drop every queued change."""
        self._queue.clear()

    def push(self, param_id: str, value: float) -> bool:
        """Queue a change; return False when the queue is full."""
        if len(self._queue) >= self._capacity - 1:
            return False
        self._queue.append((param_id, float(value)))
        return True

    def pop(self) -> Optional[Tuple[str, float]]:
        """Take the oldest change, or None when the queue is empty."""
        if not self._queue:
            return None
        return self._queue.popleft()


def _legal_value(info: ParameterInfo, value: float) -> float:
    if info.type is ParameterType.BOOL:
        return 1.0 if value >= 0.5 else 0.0
    low, high = info.minimum, info.maximum
    value = min(max(float(value), low), high)
    if info.type is ParameterType.CHOICE:
        return float(math.floor(value + 0.5))
    if info.increment > 0.0:
        value = low + info.increment * math.floor((value - low) / info.increment + 0.5)
        value = min(max(value, low), high)
    return value


class ParameterManager:
    """Holds parameter values and delivers their changes to callbacks.

    Changes arrive through :meth:`parameter_changed` (for example from a user
    interface thread) and are queued; :meth:`update_parameters`, called once
    per audio block, hands them to the registered callbacks.
    """

    def __init__(self, identifier: str, parameters: Sequence[ParameterInfo]) -> None:
        self._identifier = identifier
        self._parameters: Tuple[ParameterInfo, ...] = tuple(parameters)
        self._infos: Dict[str, ParameterInfo] = {}
        for info in self._parameters:
            if info.param_id in self._infos:
                raise ValueError(f"duplicate parameter id {info.param_id!r}")
            self._infos[info.param_id] = info
        self._values: Dict[str, float] = {
            info.param_id: _legal_value(info, info.default) for info in self._parameters
        }
        self._fifo = ParameterFIFO(64)
        self._callbacks: Dict[str, Callback] = {}

    @property
    def identifier(self) -> str:
        """Name under which the state is stored."""
        return self._identifier

    @property
    def parameters(self) -> Tuple[ParameterInfo, ...]:
        """Descriptions of all parameters, in declaration order."""
        return self._parameters

    def register_parameter_callback(self, param_id: str, callback: Optional[Callback]) -> bool:
        """Attach a callback to a parameter; False if empty, missing or taken."""
        if not param_id or callback is None or param_id in self._callbacks:
            return False
        self._callbacks[param_id] = callback
        return True

    def update_parameters(self, force: bool = False) -> None:
        """Deliver queued changes to their callbacks.

        With ``force`` every callback first receives the current value of its
        parameter, flagged as forced, and the queue is emptied.
        """
        if force:
            for param_id, callback in list(self._callbacks.items()):
                if param_id in self._values:
                    callback(self._values[param_id], True)
            self._fifo.clear()

        change = self._fifo.pop()
        while change is not None:
            param_id, value = change
            callback = self._callbacks.get(param_id)
            if callback is not None:
                callback(value, False)
            change = self._fifo.pop()

    def clear_parameter_queue(self) -> None:
        """Drop every queued change."""
        self._fifo.clear()

    def set_parameter_value(self, param_id: str, value: float) -> None:
        """Set a parameter, snapped to its range, and queue the change."""
        info = self._infos.get(param_id)
        if info is None:
            raise KeyError(param_id)
        new_value = _legal_value(info, value)
        if new_value == self._values[param_id]:
            return
        self._values[param_id] = new_value
        if param_id in self._callbacks:
            self.parameter_changed(param_id, new_value)

    def get_parameter_value(self, param_id: str) -> float:
        """Current value of a parameter."""
        try:
            return self._values[param_id]
        except KeyError:
            raise KeyError(param_id) from None

    def parameter_changed(self, param_id: str, value: float) -> None:
        """Queue a change for delivery on the next update."""
        self._fifo.push(param_id, value)

    def get_state_information(self) -> bytes:
        """Serialise the current parameter values."""
        state = {"id": self._identifier, "parameters": dict(self._values)}
        return json.dumps(state, sort_keys=True).encode("utf-8")

    def set_state_information(self, data: bytes) -> None:
        """Restore parameter values from :meth:`get_state_information` output."""
        try:
            state = json.loads(bytes(data).decode("utf-8"))
        except ValueError as exc:
            raise ValueError("invalid parameter state") from exc
        values = state.get("parameters") if isinstance(state, dict) else None
        if not isinstance(values, dict):
            raise ValueError("invalid parameter state")
        for param_id, value in values.items():
            if param_id in self._infos and isinstance(value, (int, float)):
                self.set_parameter_value(param_id, float(value))