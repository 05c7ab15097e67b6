"""Voice-driven appointment dialogue manager."""

__version__ = "0.1.0"
