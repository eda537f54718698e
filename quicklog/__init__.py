"""Typed structured logging fields, array and error field constructors, and pooled byte buffers."""

__version__ = "0.1.0"