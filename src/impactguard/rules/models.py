"""Data models for review findings."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class TextRange(BaseModel):
    """0-indexed line/char range, half-open at the end."""

    model_config = ConfigDict(frozen=True)

    start_line: int
    start_char: int
    end_line: int
    end_char: int


class AutoFix(BaseModel):
    """A replacement the edit layer applies verbatim over `range`."""

    model_config = ConfigDict(frozen=True)

    replacement_text: str
    range: TextRange


class ReviewIssue(BaseModel):
    """A single finding produced by a rule. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    title: str
    explanation: str
    suggestion: str
    file: str
    line_start: int
    line_end: int
    confidence: int = Field(ge=0, le=100)
    rule: str = ""
    auto_fix: AutoFix | None = None


class RuleDiagnostic(BaseModel):
    """A rule or capability failure that was isolated from the batch."""

    model_config = ConfigDict(frozen=True)

    rule: str
    file: str
    message: str
