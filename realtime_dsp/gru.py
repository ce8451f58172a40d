"""Single-layer gated recurrent unit with an affine output layer."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple


@dataclass
class GruParameters:
    """Flat, row-major weights and biases of a GRU and its output layer.

    Input weights are ``hidden x input``, hidden weights ``hidden x hidden``
    and output weights ``output x hidden``.
    """

    weight_ih_r: List[float] = field(default_factory=list)
    weight_ih_z: List[float] = field(default_factory=list)
    weight_ih_n: List[float] = field(default_factory=list)
    bias_ih_r: List[float] = field(default_factory=list)
    bias_ih_z: List[float] = field(default_factory=list)
    bias_ih_n: List[float] = field(default_factory=list)
    weight_hh_r: List[float] = field(default_factory=list)
    weight_hh_z: List[float] = field(default_factory=list)
    weight_hh_n: List[float] = field(default_factory=list)
    bias_hh_r: List[float] = field(default_factory=list)
    bias_hh_z: List[float] = field(default_factory=list)
    bias_hh_n: List[float] = field(default_factory=list)
    weight_output: List[float] = field(default_factory=list)
    bias_output: List[float] = field(default_factory=list)


Matrix = List[List[float]]


def _zeros(rows: int, cols: int) -> Matrix:
    return [[0.0] * cols for _ in range(rows)]


def _reshape(name: str, flat: Sequence[float], rows: int, cols: int) -> Matrix:
    if len(flat) != rows * cols:
        raise ValueError(f"{name} must have {rows * cols} values, got {len(flat)}")
    values = [float(v) for v in flat]
    return [values[r * cols:(r + 1) * cols] for r in range(rows)]


def _vector(name: str, flat: Sequence[float], size: int) -> List[float]:
    if len(flat) != size:
        raise ValueError(f"{name} must have {size} values, got {len(flat)}")
    return [float(v) for v in flat]


def _affine(weights: Matrix, bias: Sequence[float], vec: Sequence[float]) -> List[float]:
    return [b + sum(w * v for w, v in zip(row, vec)) for row, b in zip(weights, bias)]


class Gru:
    """GRU cell run sample by sample, keeping its hidden state between calls."""

    def __init__(self, input_size: int, output_size: int, hidden_size: int) -> None:
        if input_size < 1 or output_size < 1 or hidden_size < 1:
            raise ValueError("all sizes must be at least 1")
        self.input_size = input_size
        self.output_size = output_size
        self.hidden_size = hidden_size

        h, i, o = hidden_size, input_size, output_size
        self._w_ih = {gate: _zeros(h, i) for gate in "rzn"}
        self._b_ih = {gate: [0.0] * h for gate in "rzn"}
        self._w_hh = {gate: _zeros(h, h) for gate in "rzn"}
        self._b_hh = {gate: [0.0] * h for gate in "rzn"}
        self._w_out = _zeros(o, h)
        self._b_out = [0.0] * o
        self._state = [0.0] * h

    @property
    def state(self) -> Tuple[float, ...]:
        """Current hidden state."""
        return tuple(self._state)

    @staticmethod
    def sigmoid(x: float) -> float:
        """Logistic function, safe for large magnitudes."""
        if x >= 0.0:
            return 1.0 / (1.0 + math.exp(-x))
        e = math.exp(x)
        return e / (1.0 + e)

    def process(self, inputs: Sequence[Sequence[float]]) -> List[List[float]]:
        """Run a sequence of input frames; return one output frame per input."""
        outputs = []
        for frame in inputs:
            if len(frame) != self.input_size:
                raise ValueError(
                    f"each input frame must have {self.input_size} values, got {len(frame)}"
                )
            outputs.append(self._step(frame))
        return outputs

    def load_parameters(self, params: GruParameters) -> None:
        """Copy weights and biases from ``params``; sizes must match."""
        h, i, o = self.hidden_size, self.input_size, self.output_size
        w_ih = {g: _reshape(f"weight_ih_{g}", getattr(params, f"weight_ih_{g}"), h, i) for g in "rzn"}
        b_ih = {g: _vector(f"bias_ih_{g}", getattr(params, f"bias_ih_{g}"), h) for g in "rzn"}
        w_hh = {g: _reshape(f"weight_hh_{g}", getattr(params, f"weight_hh_{g}"), h, h) for g in "rzn"}
        b_hh = {g: _vector(f"bias_hh_{g}", getattr(params, f"bias_hh_{g}"), h) for g in "rzn"}
        w_out = _reshape("weight_output", params.weight_output, o, h)
        b_out = _vector("bias_output", params.bias_output, o)
        self._w_ih, self._b_ih = w_ih, b_ih
        self._w_hh, self._b_hh = w_hh, b_hh
        self._w_out, self._b_out = w_out, b_out

    def reset_state(self) -> None:
        """Zero the hidden state."""
        self._state = [0.0] * self.hidden_size

    def _step(self, x: Sequence[float]) -> List[float]:
        h = self._state
        r = [
            self.sigmoid(a + b)
            for a, b in zip(_affine(self._w_ih["r"], self._b_ih["r"], x),
                            _affine(self._w_hh["r"], self._b_hh["r"], h))
        ]
        z = [
            self.sigmoid(a + b)
            for a, b in zip(_affine(self._w_ih["z"], self._b_ih["z"], x),
                            _affine(self._w_hh["z"], self._b_hh["z"], h))
        ]
        n_in = _affine(self._w_ih["n"], self._b_ih["n"], x)
        n_hidden = _affine(self._w_hh["n"], self._b_hh["n"], h)
        n = [math.tanh(a + ri * b) for a, ri, b in zip(n_in, r, n_hidden)]
        self._state = [(1.0 - zi) * ni + zi * hi for zi, ni, hi in zip(z, n, h)]
        return _affine(self._w_out, self._b_out, self._state)