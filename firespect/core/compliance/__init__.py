"""NFPA 25 compliance rules."""

from .rules import ComplianceRuleEngine, summarize

__all__ = ["ComplianceRuleEngine", "summarize"]
