"""AST lookups used by the review rules."""

from impactguard.syntax.base import AstProvider, ContainerKind, SourceUnit, detect_language
from impactguard.syntax.context import AstContext

__all__ = ["AstContext", "AstProvider", "ContainerKind", "SourceUnit", "detect_language"]
