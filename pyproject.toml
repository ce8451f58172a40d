[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "realtime-dsp"
version = "0.1.0"
description = "Sample-by-sample audio building blocks: ramps, biquads, equalizers, delays, flangers, oscillators, envelopes, synth voices and a GRU cell"
requires-python = ">=3.10"
dependencies = []
keywords = ["audio", "dsp", "filter", "delay", "synthesizer", "envelope", "oscillator", "gru"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["realtime_dsp"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
