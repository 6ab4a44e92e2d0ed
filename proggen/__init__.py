"""Typed straight-line programs: libraries, validity checks, mutation and minimisation."""

__version__ = "0.1.0"