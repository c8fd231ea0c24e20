"""Syntactic analysis client for Spanish sentences (NGLE labelling)."""

__version__ = "0.1.0"
