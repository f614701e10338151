"""Printable Gregorian/Hijri calendar with prayer times for mosques."""

__version__ = "0.1.0"
