import math

import pytest

from realtime_dsp.ring_mod import ModType, RingMod


def make(mod_type, rate=0.0):
    rm = RingMod()
    rm.set_mod_type(mod_type)
    rm.set_mod_rate(rate)
    rm.prepare(48000.0)
    return rm


def test_sine_at_zero_rate_mutes_left_and_passes_right():
    left, right = make(ModType.SIN).process([[0.5, -0.25], [0.5, -0.25]])
    assert left == [0.0, -0.0]
    assert all(math.isclose(a, b) for a, b in zip(right, [0.5, -0.25]))


def test_triangle_at_zero_rate():
    left, right = make(ModType.TRI).process([[0.5, 0.5], [0.5, 0.5]])
    assert all(math.isclose(x, 0.5) for x in left)
    assert all(math.isclose(x, 0.0, abs_tol=1e-12) for x in right)


def test_square_at_zero_rate_inverts_both():
    left, right = make(ModType.SQR).process([[0.5], [-0.25]])
    assert left == [-0.5]
    assert right == [0.25]


def test_output_never_exceeds_input_magnitude():
    rm = make(ModType.SIN, rate=440.0)
    signal = [1.0] * 500
    left, right = rm.process([signal, signal])
    assert all(abs(x) <= 1.0 for x in left + right)
    assert min(left) < 0.0 < max(left)


def test_extra_channels_are_dropped():
    out = make(ModType.SQR).process([[1.0], [1.0], [1.0]])
    assert len(out) == 2


def test_mod_type_clamps_to_square():
    rm = RingMod()
    rm.set_mod_type(7)
    assert rm.mod_type is ModType.SQR
    with pytest.raises(ValueError):
        rm.set_mod_type(-1)


def test_rate_not_negative():
    rm = RingMod()
    rm.set_mod_rate(-3.0)
    assert rm.mod_rate == 0.0


def test_invalid_input_raises():
    rm = make(ModType.SIN)
    with pytest.raises(ValueError):
        rm.process([[1.0, 2.0], [1.0]])
    with pytest.raises(ValueError):
        rm.prepare(0.0)