"""Relkit - release workflow helpers."""

__version__ = "0.1.0"
