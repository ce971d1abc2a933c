"""Traffic capacity allocation for housing records."""

__version__ = "0.1.0"
