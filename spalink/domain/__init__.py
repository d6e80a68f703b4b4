"""
This package defines the core domain models for the spalink library.

It exposes the aggregated ``Reading`` produced by each collection session.
"""
from spalink.domain.reading import Reading, median

__all__ = ["Reading", "median"]
