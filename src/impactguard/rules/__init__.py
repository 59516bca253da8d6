"""Review rules and the engine that runs them."""

from impactguard.rules.base import Rule, RuleContext
from impactguard.rules.engine import ReviewResult, RuleEngine
from impactguard.rules.models import AutoFix, ReviewIssue, RuleDiagnostic, Severity, TextRange
from impactguard.rules.registry import RuleRegistry, default_rules, register_rule

__all__ = [
    "AutoFix",
    "ReviewIssue",
    "ReviewResult",
    "Rule",
    "RuleContext",
    "RuleDiagnostic",
    "RuleEngine",
    "RuleRegistry",
    "Severity",
    "TextRange",
    "default_rules",
    "register_rule",
]
