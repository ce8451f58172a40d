import math

import pytest

from realtime_dsp.synth import LFOType, MonoSynthVoice, SynthFilterType


def make_voice(output_db=0.0):
    voice = MonoSynthVoice()
    voice.set_sample_rate(48000.0)
    voice.set_osc_sin_vol(0.0, True)
    voice.set_osc_tri_vol(-120.0, True)
    voice.set_osc_saw_vol(-120.0, True)
    voice.set_osc_vol(0.0, True)
    voice.set_output_vol(output_db, True)
    voice.set_filter_cutoff(2000.0, True)
    voice.set_filter_reso(1.0, True)
    voice.set_filter_type(SynthFilterType.LPF, True)
    voice.render_next_block([[0.0]], 0, 1)
    return voice


def render(voice, n, channels=1):
    out = [[0.0] * n for _ in range(channels)]
    voice.render_next_block(out, 0, n)
    return out


@pytest.mark.parametrize(
    "beyond, limit",
    [
        (1.0e6, MonoSynthVoice.MAX_FREQ_HZ),
        (1.0, MonoSynthVoice.MIN_FREQ_HZ),
    ],
)
def test_filter_cutoff_is_clamped_to_limits(beyond, limit):
    clamped = make_voice()
    exact = make_voice()
    clamped.set_filter_cutoff(beyond, True)
    exact.set_filter_cutoff(limit, True)
    for voice in (clamped, exact):
        voice.start_note(60, 1.0)
    a = render(clamped, 300)[0]
    b = render(exact, 300)[0]
    for x, y in zip(a, b):
        assert x == pytest.approx(y, abs=1e-12)


def test_silent_without_note_and_output_is_added():
    voice = make_voice()
    out = [[1.0] * 64, [1.0] * 64]
    voice.render_next_block(out, 0, 64)
    assert out == [[1.0] * 64, [1.0] * 64]


def test_note_produces_sound_on_all_channels():
    voice = make_voice()
    voice.start_note(69, 1.0)
    out = render(voice, 512, channels=2)
    assert out[0] == out[1]
    assert max(abs(x) for x in out[0]) > 0.01


def test_output_volume_scales_linearly():
    loud = make_voice(0.0)
    quiet = make_voice(20.0 * math.log10(0.5))
    for voice in (loud, quiet):
        voice.start_note(60, 1.0)
    a = render(loud, 400)[0]
    b = render(quiet, 400)[0]
    for x, y in zip(a, b):
        assert y == pytest.approx(0.5 * x, abs=1e-12)


def test_velocity_scales_linearly():
    full = make_voice()
    half = make_voice()
    full.start_note(60, 1.0)
    half.start_note(60, 0.5)
    a = render(full, 400)[0]
    b = render(half, 400)[0]
    for x, y in zip(a, b):
        assert y == pytest.approx(0.5 * x, abs=1e-12)


def test_stop_without_tail_frees_voice():
    voice = make_voice()
    voice.start_note(62, 1.0)
    assert voice.current_note == 62
    voice.stop_note(0.0, False)
    assert voice.current_note is None
    assert not voice.is_active


def test_voice_frees_itself_after_release():
    voice = make_voice()
    voice.start_note(60, 1.0)
    render(voice, 200)
    voice.stop_note(0.0, True)
    assert voice.current_note == 60
    render(voice, 6000)
    assert voice.current_note is None


def test_release_reaches_silence():
    voice = make_voice()
    voice.start_note(60, 1.0)
    render(voice, 500)
    voice.stop_note(0.0, True)
    out = render(voice, 8000)[0]
    assert max(abs(x) for x in out[-500:]) < 1e-3


def test_lfo_type_accepts_enum_values():
    voice = make_voice()
    voice.set_lfo_type_vcf(1)
    voice.set_lfo_amount_vcf(0.5, True)
    voice.set_lfo_freq_vcf(5.0)
    voice.start_note(60, 1.0)
    out = render(voice, 256)[0]
    assert all(math.isfinite(x) for x in out)
    assert LFOType(1) is LFOType.TRI


def test_short_output_rejected():
    voice = make_voice()
    with pytest.raises(ValueError):
        voice.render_next_block([[0.0] * 4], 2, 4)


def test_invalid_sample_rate_rejected():
    with pytest.raises(ValueError):
        MonoSynthVoice().set_sample_rate(-1.0)