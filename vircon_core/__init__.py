"""Core components of a Vircon32 console emulator: timer, sound unit and software rasterizer."""

__version__ = "0.1.0"