"""ESPN schedule synchronization for the sport picks backend."""

__version__ = "0.1.0"
