"""Sample-by-sample audio processing blocks for filtering, delay, modulation, synthesis and parameter handling."""

__version__ = "0.1.0"