"""An HTTP load tester, an SQLite-backed link store and their building blocks."""

__version__ = "0.1.0"