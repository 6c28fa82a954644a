"""Target pacing engine: monthly allocation, progress and status rules."""

__version__ = "0.1.0"
