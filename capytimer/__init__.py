"""CapyTimer: a focus/break session timer that rewards finished focus time."""

__version__ = "0.1.0"
