import pytest

from realtime_dsp.ramp import Ramp


def test_skip_ramp_on_prepare_jumps_to_value():
    ramp = Ramp(0.05)
    ramp.prepare(48000.0, True, 0.5)
    assert ramp.next_value() == 0.5
    assert ramp.current == 0.5


def test_ramp_rises_monotonically_and_reaches_target():
    ramp = Ramp(0.01)
    ramp.prepare(1000.0)
    ramp.set_target(1.0)
    values = [ramp.next_value() for _ in range(20)]
    assert all(b >= a for a, b in zip(values, values[1:]))
    assert all(v <= 1.0 for v in values)
    assert values[-1] == 1.0
    assert values[0] < 1.0
    reached = values.index(1.0)
    assert reached <= 10


def test_ramp_falls_to_lower_target():
    ramp = Ramp(0.01)
    ramp.prepare(1000.0, True, 1.0)
    ramp.set_target(0.0)
    values = [ramp.next_value() for _ in range(20)]
    assert all(b <= a for a, b in zip(values, values[1:]))
    assert values[-1] == 0.0
    assert values[0] > 0.0


def test_ramp_time_is_clamped_to_minimum():
    a = Ramp(0.0)
    b = Ramp(Ramp.MIN_RAMP_TIME)
    assert a.ramp_time == b.ramp_time
    for r in (a, b):
        r.prepare(48000.0)
        r.set_target(1.0)
    assert [a.next_value() for _ in range(60)] == [b.next_value() for _ in range(60)]


def test_zero_ramp_time_jumps_immediately():
    ramp = Ramp()
    ramp.prepare(48000.0)
    ramp.set_ramp_time(0.0)
    ramp.set_target(0.75)
    assert ramp.next_value() == 0.75


def test_tiny_target_change_is_ignored():
    ramp = Ramp()
    ramp.prepare(48000.0)
    ramp.set_target(1e-12)
    assert ramp.target == 0.0
    assert ramp.next_value() == 0.0


def test_skip_ramp_on_set_target():
    ramp = Ramp()
    ramp.set_target(3.0, True)
    assert ramp.current == 3.0
    assert ramp.next_value() == 3.0


def test_apply_gain_scales_all_channels():
    ramp = Ramp()
    ramp.prepare(48000.0, True, 2.0)
    out = ramp.apply_gain([[1.0, 1.0, 1.0], [0.5, -0.5, 0.0]])
    assert out == [[2.0, 2.0, 2.0], [1.0, -1.0, 0.0]]


def test_apply_sum_adds_to_all_channels():
    ramp = Ramp()
    ramp.prepare(48000.0, True, 2.0)
    out = ramp.apply_sum([[1.0, 1.0], [0.0, -1.0]])
    assert out == [[3.0, 3.0], [2.0, 1.0]]


def test_frame_variants_match_block_variants():
    block_ramp = Ramp(0.01)
    frame_ramp = Ramp(0.01)
    for r in (block_ramp, frame_ramp):
        r.prepare(1000.0)
        r.set_target(1.0)
    buffers = [[1.0] * 8, [0.5] * 8]
    block = block_ramp.apply_gain(buffers)
    frames = [frame_ramp.apply_gain_frame(f) for f in zip(*buffers)]
    assert [list(ch) for ch in zip(*frames)] == block


def test_apply_sum_frame_returns_new_values():
    ramp = Ramp()
    ramp.prepare(48000.0, True, 1.5)
    assert ramp.apply_sum_frame([0.0, 1.0]) == [1.5, 2.5]


def test_empty_block_keeps_channel_count():
    ramp = Ramp()
    assert ramp.apply_gain([[], []]) == [[], []]


def test_prepare_without_skip_keeps_heading_to_target():
    ramp = Ramp(0.01)
    ramp.prepare(1000.0)
    ramp.set_target(1.0)
    ramp.next_value()
    ramp.prepare(2000.0)
    values = [ramp.next_value() for _ in range(40)]
    assert values[-1] == 1.0
    assert ramp.target == 1.0
    assert values[0] == pytest.approx(values[1] - (values[2] - values[1]))