"""Deterministic transcript extraction."""

from .field_extractor import FieldExtractor

__all__ = ["FieldExtractor"]
