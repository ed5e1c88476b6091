"""Concurrent HTTP requests with aggregated performance results."""

__version__ = "0.1.0"