import math

import pytest

from realtime_dsp.envelope import EnvelopeGenerator, EnvelopeState


@pytest.fixture
def env():
    e = EnvelopeGenerator()
    e.prepare(48000.0)
    return e


def test_off_outputs_zero(env):
    assert env.process(16) == [0.0] * 16
    assert env.is_off()


def test_digital_attack_reaches_one_in_attack_time(env):
    env.start()
    out = env.process(480)
    assert math.isclose(out[-1], 1.0)
    assert all(b >= a for a, b in zip(out, out[1:]))
    assert env.state is EnvelopeState.ATTACK
    env.process(1)
    assert env.state is EnvelopeState.DECAY


def test_digital_full_cycle_reaches_sustain_then_off(env):
    env.set_sustain_level(0.5)
    env.start()
    env.process(480 + 1 + 240)
    assert math.isclose(env.current, 0.5)
    env.process(1)
    assert env.state is EnvelopeState.SUSTAIN
    assert env.process(10) == [0.5] * 10
    env.end()
    out = env.process(2400)
    assert math.isclose(out[-1], 0.0, abs_tol=1e-12)
    env.process(1)
    assert env.is_off()


def test_sustain_level_is_clamped(env):
    env.set_sustain_level(3.0)
    assert env.sustain_level == 1.0
    env.set_sustain_level(-1.0)
    assert env.sustain_level == 0.0


def test_times_have_minimum(env):
    env.set_attack_time(0.0)
    env.set_decay_time(-5.0)
    env.set_release_time(0.01)
    assert env.attack_time_ms == EnvelopeGenerator.MIN_TIME_MS
    assert env.decay_time_ms == EnvelopeGenerator.MIN_TIME_MS
    assert env.release_time_ms == EnvelopeGenerator.MIN_TIME_MS


def test_shortening_attack_mid_stage_finishes_next_sample(env):
    env.start()
    env.process(100)
    env.set_attack_time(1.0)
    assert math.isclose(env.process(1)[0], 1.0)


def test_analog_attack_and_release(env):
    env.set_analog_style(True)
    env.start()
    out = env.process(5000)
    assert max(out) <= 1.0
    assert all(b >= a for a, b in zip(out[:1000], out[1:1000]))
    assert env.state is EnvelopeState.SUSTAIN
    env.end()
    env.process(30000)
    assert env.is_off()
    assert env.current == 0.0


def test_prepare_switches_off(env):
    env.start()
    env.process(10)
    env.prepare(44100.0)
    assert env.state is EnvelopeState.OFF


def test_negative_sample_count_rejected(env):
    with pytest.raises(ValueError):
        env.process(-1)