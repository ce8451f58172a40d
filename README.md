# realtime-dsp

Audio processing blocks in plain Python, with no dependencies outside the
standard library. Each block keeps its state between calls, so a stream can
be fed to it in chunks of any size. Audio is passed as plain lists of floats,
one list per channel.

## What is included

- `realtime_dsp.ramp.Ramp`: a linear parameter smoother. `next_value()` steps
  it by one sample; `apply_sum` and `apply_gain` (and their `_frame` forms)
  return new lists with the ramp added or multiplied in.
- `realtime_dsp.biquad.Biquad`: cascaded second-order sections over several
  channels. Input channels past the allocated count are dropped.
- `realtime_dsp.parametric_equalizer.ParametricEqualizer`: a fixed number of
  bands, each `FilterType.FLAT`, `HIGH_PASS`, `LOW_SHELF`, `PEAK`, `LOW_PASS`
  or `HIGH_SHELF`.
- `realtime_dsp.delay_line.DelayLine`: a whole-sample delay, plus
  `process_modulated` reads with a per-sample fractional extra delay and
  linear interpolation.
- `realtime_dsp.delay.Delay`: a tape-style stereo delay with feedback, wow,
  a low-pass tone filter and tanh saturation.
- `realtime_dsp.flanger.Flanger`: a stereo flanger with `ModulationType.SIN`
  or `TRI` modulation.
- `realtime_dsp.ring_mod.RingMod`: a ring modulator with `ModType.SIN`, `TRI`
  or `SQR` carriers; the right channel runs a quarter cycle ahead.
- `realtime_dsp.oscillator.Oscillator`: sine, aliased triangle and saw, and
  DPW anti-aliased triangle and saw (`OscType`).
- `realtime_dsp.envelope.EnvelopeGenerator`: an ADSR envelope in digital
  (linear) or analog (exponential) style.
- `realtime_dsp.state_variable_filter.StateVariableFilter`: a state-variable
  filter returning low-pass, band-pass and high-pass outputs; frequency and
  resonance may be one value or one value per sample.
- `realtime_dsp.meter.Meter`: an instant-attack peak meter for up to two
  channels, read with `envelope(channel)`.
- `realtime_dsp.synth_voice.SynthVoice`: one oscillator under an
  attack/release ramp. `render_next_block` overwrites the first channel and
  copies it to the second. `convert_midi_note_to_freq` maps MIDI notes to Hz.
- `realtime_dsp.synth.MonoSynthVoice`: three oscillators, amplifier and
  filter envelopes, a filter LFO and a selectable filter output
  (`SynthFilterType`). `render_next_block` adds into every channel.
- `realtime_dsp.parameters`: `ParameterInfo` descriptions (float, choice,
  boolean), a bounded `ParameterFIFO`, and a `ParameterManager` that queues
  value changes and hands them to callbacks on `update_parameters()`. State
  is saved and restored as JSON bytes.
- `realtime_dsp.gru.Gru` and `GruParameters`: a gated recurrent unit with an
  affine output layer, run frame by frame.
- `realtime_dsp.delay_processor.DelayProcessor`: the delay wired to a
  parameter manager, with a wet/dry mix and a meter on the wet signal.

## Installing

```
pip install .
```

## Examples

A high-pass band on two channels:

```python
from realtime_dsp.parametric_equalizer import ParametricEqualizer, FilterType

eq = ParametricEqualizer(1, 2)
eq.set_band_type(0, FilterType.HIGH_PASS)
eq.set_band_frequency(0, 100.0)
eq.prepare(48000.0, 2)

left = [1.0] + [0.0] * 63
right = [0.0] * 64
out_left, out_right = eq.process([left, right])
```

The delay effect, processing a buffer in place:

```python
from realtime_dsp.delay_processor import DelayProcessor

proc = DelayProcessor()
proc.prepare_to_play(48000.0, 256, 2)
proc.parameter_manager.set_parameter_value("feedback", 0.3)

block = [[0.0] * 256, [0.0] * 256]
block[0][0] = 1.0
proc.process_block(block)      # block now holds the output
level = proc.meter.envelope(0)
```

A synth voice rendering into a stereo buffer:

```python
from realtime_dsp.synth_voice import SynthVoice

voice = SynthVoice()
voice.set_sample_rate(48000.0)
voice.start_note(69, 0.8)
out = [[0.0] * 128, [0.0] * 128]
voice.render_next_block(out, 0, 128)
```

Parameter changes delivered to a callback:

```python
from realtime_dsp.parameters import ParameterInfo, ParameterManager

manager = ParameterManager("demo", [
    ParameterInfo.float_param("gain", "Gain", "dB", 0.0, -24.0, 24.0, 0.1, 1.0),
])
manager.register_parameter_callback("gain", lambda value, forced: print(value, forced))
manager.set_parameter_value("gain", 6.0)
manager.update_parameters()    # prints: 6.0 False
```

## What it does not do

The package processes lists of samples and nothing more. It does not open
audio devices, read or write audio files, receive MIDI, allocate voices
across notes, host plugins or draw any user interface. `Gru` ships without
trained weights; load them with `load_parameters(GruParameters(...))`.

## Running the tests

```
pip install .[test]
pytest
```