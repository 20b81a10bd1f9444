"""Audit provider schemas against documentation and API design rules."""

__version__ = "0.1.0"
