"""vshrink - two-pass batch transcoding with size-based acceptance."""

__version__ = "0.1.0"
