"""Focus Garden -- a focus timer that grows a garden, one session at a time."""

__version__ = "0.1.0"
