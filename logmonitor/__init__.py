"""Storage layer for monitoring the integrity of remote log files."""

__version__ = "0.1.0"