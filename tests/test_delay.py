import random

import pytest

from realtime_dsp.delay import Delay

SR = 48000.0


def noise(n, seed=1):
    rng = random.Random(seed)
    return [rng.uniform(-1.0, 1.0) for _ in range(n)]


def impulse(n):
    return [1.0] + [0.0] * (n - 1)


def first_nonzero(values):
    return next(i for i, v in enumerate(values) if v != 0.0)


def prepared(delay_ms=10.0, feedback=0.0, wow=0.0, channels=1):
    delay = Delay(100.0, channels)
    delay.set_delay_time(delay_ms)
    delay.set_feedback(feedback)
    delay.set_wow(wow)
    delay.prepare(SR, 100.0, channels)
    return delay


def test_silence_in_gives_silence_out():
    delay = prepared()
    out = delay.process([[0.0] * 500])
    assert out == [[0.0] * 500]


def test_echo_arrives_after_delay_time():
    delay_ms = 10.0
    delay = prepared(delay_ms)
    out = delay.process([impulse(700)])[0]
    start = first_nonzero(out)
    assert start >= delay_ms * SR / 1000.0
    assert start <= delay_ms * SR / 1000.0 + 2


def test_longer_delay_time_arrives_later():
    short = prepared(5.0).process([impulse(1000)])[0]
    long = prepared(15.0).process([impulse(1000)])[0]
    assert first_nonzero(long) > first_nonzero(short)


def test_feedback_produces_repeats():
    window = slice(940, 1100)
    with_fb = prepared(feedback=1.0).process([impulse(1200)])[0]
    without_fb = prepared(feedback=0.0).process([impulse(1200)])[0]
    peak_with = max(abs(v) for v in with_fb[window])
    peak_without = max(abs(v) for v in without_fb[window])
    assert peak_with > 1000 * peak_without


def test_stereo_channels_match_without_wow():
    signal = noise(2000)
    out = prepared(5.0, channels=2).process([signal, signal])
    assert out[0] == out[1]


def test_wow_decorrelates_channels():
    signal = noise(4000)
    out = prepared(5.0, wow=1.0, channels=2).process([signal, signal])
    assert out[0] != out[1]


def test_clear_silences_buffered_signal():
    delay = prepared(5.0, feedback=0.8)
    delay.process([noise(1000)])
    delay.clear()
    assert delay.process([[0.0] * 1000]) == [[0.0] * 1000]


def test_setters_clamp():
    delay = Delay(100.0, 2)
    delay.set_feedback(2.0)
    delay.set_wow(-1.0)
    delay.set_distortion(100.0)
    delay.set_delay_time(0.0)
    assert delay.feedback == 1.0
    assert delay.wow == 0.0
    assert delay.distortion == 36.0
    assert delay.delay_time_ms == 1.0


def test_tone_frequency_clamps():
    delay = Delay(100.0, 2)
    delay.set_tone_frequency(5.0)
    assert delay.tone_frequency == 20.0
    delay.set_tone_frequency(1e6)
    assert delay.tone_frequency == 20000.0


def test_too_many_channels_raise():
    delay = prepared(channels=2)
    with pytest.raises(ValueError):
        delay.process([[0.0], [0.0], [0.0]])