"""lazydata: a keyboard-driven terminal client for relational databases."""

__version__ = "0.1.0"
