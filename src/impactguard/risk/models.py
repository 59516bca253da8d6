"""Data models for the risk report."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class RiskItem(BaseModel):
    """One ranked risk. `priority` is a heuristic severity, not a confidence."""

    priority: int
    reason: str
    suggestion: str
    file: str | None = None
    line: int | None = None
    can_fix: bool | None = None
    fix_command: str | None = None


class RiskAnalysis(BaseModel):
    """Overall score, its qualitative level and the top-ranked risks."""

    score: int
    level: RiskLevel
    risks: list[RiskItem] = Field(default_factory=list)
