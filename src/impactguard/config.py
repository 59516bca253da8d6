"""Configuration management for ImpactGuard."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from impactguard.exceptions import ConfigError

IMPACTGUARD_DIR = ".impactguard"
CONFIG_FILE = "config.json"

DEFAULT_DEBUG_PATTERNS = [
    r"\bconsole\.(?:log|debug)\(",
    r"^\s*debugger\b",
    r"(?<![\w.])print\(",
    r"\bbreakpoint\(\)",
    r"\bpdb\.set_trace\(\)",
]

DEFAULT_FEATURE_MAP = {
    "auth": "Authentication Logic",
    "api": "API Configuration",
    "db": "Database Schema",
    "ui": "User Interface",
    "core": "Core Domain Logic",
    "services": "Backend Services",
    "utils": "Utility Functions",
}


class ReviewConfig(BaseModel):
    """Rule engine configuration."""

    # rule name -> enabled; only an explicit False disables a rule
    rules: dict[str, bool] = Field(default_factory=dict)
    debug_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_DEBUG_PATTERNS))
    await_marker: str = "await "
    payload_name_pattern: str = "Response|Payload|Dto|Interface"

    def is_enabled(self, rule_name: str) -> bool:
        return self.rules.get(rule_name) is not False


class RiskConfig(BaseModel):
    """Risk scoring configuration."""

    critical_paths: list[str] = Field(default_factory=lambda: ["auth", "payment"])
    feature_map: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_FEATURE_MAP))
    max_risks: int = 10


class IndexerConfig(BaseModel):
    """Import index configuration."""

    exclude_patterns: list[str] = Field(
        default_factory=lambda: [
            "node_modules",
            "__pycache__",
            ".git",
            ".impactguard",
            "dist",
            "build",
            ".venv",
            "venv",
            "*.min.js",
            "*.d.ts",
        ]
    )
    max_file_size_kb: int = 500


class ProjectConfig(BaseModel):
    """Full project configuration."""

    name: str = ""
    root_path: str = "."
    review: ReviewConfig = Field(default_factory=ReviewConfig)
    risk: RiskConfig = Field(default_factory=RiskConfig)
    indexer: IndexerConfig = Field(default_factory=IndexerConfig)


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from `start` looking for a .impactguard directory."""
    current = (start or Path.cwd()).resolve()
    while current != current.parent:
        if (current / IMPACTGUARD_DIR).is_dir():
            return current
        current = current.parent
    if (current / IMPACTGUARD_DIR).is_dir():
        return current
    return None


def get_impactguard_dir(root: Path) -> Path:
    """Get the .impactguard directory for a project root."""
    return root / IMPACTGUARD_DIR


def load_config(root: Path) -> ProjectConfig:
    """Load configuration from .impactguard/config.json."""
    config_path = get_impactguard_dir(root) / CONFIG_FILE
    if not config_path.exists():
        return ProjectConfig(name=root.name, root_path=str(root))
    try:
        data = json.loads(config_path.read_text())
        return ProjectConfig(**data)
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e


def save_config(root: Path, config: ProjectConfig) -> None:
    """Save configuration to .impactguard/config.json."""
    ig_dir = get_impactguard_dir(root)
    ig_dir.mkdir(parents=True, exist_ok=True)
    config_path = ig_dir / CONFIG_FILE
    config_path.write_text(json.dumps(config.model_dump(), indent=2))


def set_config_value(config: ProjectConfig, key: str, value: Any) -> ProjectConfig:
    """Set a nested config value using dot notation (e.g., 'risk.max_risks').

    Keys under ``review.rules`` may be new, so rules can be toggled by name.
    """
    parts = key.split(".")
    data = config.model_dump()
    target = data
    for part in parts[:-1]:
        if part not in target or not isinstance(target[part], dict):
            raise KeyError(f"Invalid config key: {key}")
        target = target[part]
    if parts[-1] not in target and parts[:-1] != ["review", "rules"]:
        raise KeyError(f"Invalid config key: {key}")
    target[parts[-1]] = value
    try:
        return ProjectConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid value for {key}: {e}") from e
