"""Heuristic risk scoring for a change set."""

from impactguard.risk.models import RiskAnalysis, RiskItem, RiskLevel
from impactguard.risk.scorer import RiskScorer

__all__ = ["RiskAnalysis", "RiskItem", "RiskLevel", "RiskScorer"]
