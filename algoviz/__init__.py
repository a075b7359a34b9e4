"""algoviz - step-by-step replay and rendering of externally executed algorithms."""

__version__ = "0.1.0"
