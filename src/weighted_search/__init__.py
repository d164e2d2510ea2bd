"""Weighted substring search with excerpts and manual relevance overrides."""

__version__ = "1.0.0"
