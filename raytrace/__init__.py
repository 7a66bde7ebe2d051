"""A recursive ray tracer for scenes described in a plain-text file."""

__version__ = "0.1.0"