"""Compiled text markers shared by the review rules and the risk scorer."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

from impactguard.exceptions import ConfigError

SECRET_PATTERN = re.compile(
    r"(password|secret|api[_-]?key|token)\s*[:=]\s*['\"].+['\"]", re.IGNORECASE
)


def compile_patterns(patterns: Iterable[str]) -> list[re.Pattern]:
    """Compile configured regexes, reporting the first invalid one."""
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ConfigError(f"Invalid pattern {pattern!r}: {e}") from e
    return compiled


def find_marker(text: str, patterns: Iterable[re.Pattern]) -> re.Match | None:
    """First pattern match in `text`, or None."""
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match
    return None


@lru_cache(maxsize=32)
def cached_patterns(patterns: tuple[str, ...]) -> tuple[re.Pattern, ...]:
    """compile_patterns for immutable pattern lists, memoized."""
    return tuple(compile_patterns(patterns))
