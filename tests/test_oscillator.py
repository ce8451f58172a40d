import math

import pytest

from realtime_dsp.oscillator import Oscillator, OscType


def make(osc_type, sample_rate=48000.0, freq=1000.0):
    osc = Oscillator()
    osc.prepare(sample_rate)
    osc.set_frequency(freq)
    osc.set_type(osc_type)
    return osc


def test_saw_aliased_starts_at_minus_one_and_rises():
    out = make(OscType.SAW_ALIASED).process(10)
    assert out[0] == -1.0
    assert all(b > a for a, b in zip(out, out[1:]))


def test_tri_aliased_starts_at_one():
    out = make(OscType.TRI_ALIASED).process(4)
    assert out[0] == 1.0
    assert out[1] < out[0]


def test_sine_starts_at_zero_and_is_periodic():
    osc = make(OscType.SIN, sample_rate=8000.0, freq=1000.0)
    out = osc.process(24)
    assert out[0] == 0.0
    for a, b in zip(out, out[8:]):
        assert math.isclose(a, b, abs_tol=1e-12)


@pytest.mark.parametrize("osc_type", [OscType.SIN, OscType.TRI_ALIASED, OscType.SAW_ALIASED])
def test_aliased_waveforms_stay_in_range(osc_type):
    out = make(osc_type, freq=1234.5).process(2000)
    assert all(-1.0 <= x <= 1.0 for x in out)


def test_next_sample_matches_block_process():
    a = make(OscType.SAW_AA)
    b = make(OscType.SAW_AA)
    assert a.process(50) == [b.next_sample() for _ in range(50)]


def test_set_type_restarts_phase():
    osc = make(OscType.TRI_AA)
    first = osc.process(30)
    osc.process(17)
    osc.set_type(OscType.TRI_AA)
    assert osc.process(30) == first


def test_dpw_saw_tracks_naive_saw_at_low_frequency():
    naive = make(OscType.SAW_ALIASED, freq=100.0).process(470)
    dpw = make(OscType.SAW_AA, freq=100.0).process(470)
    for x, y in zip(naive[1:], dpw[1:]):
        assert abs(x - y) < 0.01


def test_frequency_is_clamped():
    osc = Oscillator()
    osc.set_frequency(0.0)
    assert osc.frequency == Oscillator.MIN_FREQUENCY
    osc.set_frequency(1e6)
    assert osc.frequency == Oscillator.MAX_FREQUENCY


def test_invalid_arguments_raise():
    osc = Oscillator()
    with pytest.raises(ValueError):
        osc.prepare(0.0)
    with pytest.raises(ValueError):
        osc.process(-3)
    with pytest.raises(ValueError):
        osc.set_type(9)