"""Run a command under a Redis-backed lock so it never overlaps across hosts."""

__all__ = ["__version__"]

__version__ = "0.1.0"
