"""Sisyflow - ticket tracking board with AI-assisted ticket writing."""

__version__ = "0.1.0"
