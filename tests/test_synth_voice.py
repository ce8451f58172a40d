import pytest

from realtime_dsp.oscillator import Oscillator, OscType
from realtime_dsp.synth_voice import SynthVoice, convert_midi_note_to_freq


def test_midi_a4_is_440():
    assert convert_midi_note_to_freq(69) == pytest.approx(440.0)


def test_midi_octaves_double():
    assert convert_midi_note_to_freq(81) == pytest.approx(2 * convert_midi_note_to_freq(69))
    assert convert_midi_note_to_freq(57) == pytest.approx(convert_midi_note_to_freq(69) / 2)


def test_silent_before_note():
    voice = SynthVoice()
    out = [[1.0] * 64, [1.0] * 64]
    voice.render_next_block(out, 0, 64)
    assert out[0] == [0.0] * 64
    assert out[1] == [0.0] * 64


def test_second_channel_copies_first():
    voice = SynthVoice()
    voice.set_wave_type(OscType.SAW_ALIASED)
    voice.start_note(69, 1.0)
    out = [[0.0] * 256, [0.0] * 256]
    voice.render_next_block(out, 0, 256)
    assert out[1] == out[0]
    assert any(abs(x) > 0.0 for x in out[0])


def test_samples_before_start_untouched():
    voice = SynthVoice()
    voice.start_note(60, 1.0)
    out = [[7.0] * 32]
    voice.render_next_block(out, 10, 22)
    assert out[0][:10] == [7.0] * 10


def test_steady_state_matches_oscillator_times_velocity():
    voice = SynthVoice()
    voice.set_att_rel_time(1.0)
    voice.set_wave_type(OscType.SAW_ALIASED)
    voice.start_note(69, 0.5)
    n = 500
    out = [[0.0] * n]
    voice.render_next_block(out, 0, n)

    osc = Oscillator()
    osc.set_type(OscType.SAW_ALIASED)
    osc.set_frequency(convert_midi_note_to_freq(69))
    reference = osc.process(n)
    for got, ref in zip(out[0][-50:], reference[-50:]):
        assert got == pytest.approx(0.5 * ref)


def test_stop_note_fades_to_silence():
    voice = SynthVoice()
    voice.set_att_rel_time(1.0)
    voice.set_wave_type(OscType.SAW_ALIASED)
    voice.start_note(64, 1.0)
    voice.render_next_block([[0.0] * 500], 0, 500)
    voice.stop_note(0.0, True)
    out = [[1.0] * 500]
    voice.render_next_block(out, 0, 500)
    assert out[0][-100:] == [0.0] * 100


def test_sample_rate_change_applied_on_render():
    voice = SynthVoice()
    voice.set_sample_rate(96000.0)
    assert voice.sample_rate == 48000.0
    voice.render_next_block([[0.0] * 4], 0, 4)
    assert voice.sample_rate == 96000.0


def test_invalid_sample_rate_rejected():
    with pytest.raises(ValueError):
        SynthVoice().set_sample_rate(0.0)


def test_short_output_rejected():
    voice = SynthVoice()
    with pytest.raises(ValueError):
        voice.render_next_block([[0.0] * 8], 4, 8)