"""Inspection conversation agent."""

from .inspection_agent import InspectionAgent

__all__ = ["InspectionAgent"]
