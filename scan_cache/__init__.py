"""Incremental dependency scanning with a local per-component result cache."""

__version__ = "0.1.0"
