"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from impactguard.config import (
    ProjectConfig,
    ReviewConfig,
    find_project_root,
    get_impactguard_dir,
    load_config,
    save_config,
    set_config_value,
)
from impactguard.exceptions import ConfigError
from impactguard.markers import compile_patterns


class TestProjectConfig:
    def test_defaults(self):
        config = ProjectConfig()
        assert config.risk.critical_paths == ["auth", "payment"]
        assert config.risk.max_risks == 10
        assert config.review.await_marker == "await "
        assert config.review.rules == {}

    def test_rules_enabled_unless_explicitly_disabled(self):
        review = ReviewConfig(rules={"no-any-type": False, "payload-guard": True})
        assert not review.is_enabled("no-any-type")
        assert review.is_enabled("payload-guard")
        assert review.is_enabled("no-debug-statement")

    def test_default_debug_patterns_compile(self):
        assert len(compile_patterns(ReviewConfig().debug_patterns)) == 5

    def test_invalid_pattern(self):
        with pytest.raises(ConfigError):
            compile_patterns(["(unclosed"])


class TestConfigIO:
    def test_save_and_load(self, tmp_path: Path):
        config = ProjectConfig(name="demo")
        config.risk.critical_paths = ["billing"]
        save_config(tmp_path, config)

        assert (get_impactguard_dir(tmp_path) / "config.json").exists()
        loaded = load_config(tmp_path)
        assert loaded.name == "demo"
        assert loaded.risk.critical_paths == ["billing"]

    def test_load_missing_gives_defaults(self, tmp_path: Path):
        config = load_config(tmp_path)
        assert config.name == tmp_path.name

    def test_load_invalid_json(self, tmp_path: Path):
        get_impactguard_dir(tmp_path).mkdir()
        (get_impactguard_dir(tmp_path) / "config.json").write_text("{not json")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_load_invalid_values(self, tmp_path: Path):
        get_impactguard_dir(tmp_path).mkdir()
        (get_impactguard_dir(tmp_path) / "config.json").write_text('{"risk": {"max_risks": "many"}}')
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_find_project_root(self, tmp_path: Path):
        get_impactguard_dir(tmp_path).mkdir()
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_project_root(nested) == tmp_path.resolve()


class TestSetConfigValue:
    def test_nested_value(self):
        config = set_config_value(ProjectConfig(), "risk.max_risks", 3)
        assert config.risk.max_risks == 3

    def test_toggle_rule_by_name(self):
        config = set_config_value(ProjectConfig(), "review.rules.payload-guard", False)
        assert not config.review.is_enabled("payload-guard")

    def test_unknown_key(self):
        with pytest.raises(KeyError):
            set_config_value(ProjectConfig(), "risk.nope", 1)
        with pytest.raises(KeyError):
            set_config_value(ProjectConfig(), "nope.max_risks", 1)

    def test_invalid_value(self):
        with pytest.raises(ConfigError):
            set_config_value(ProjectConfig(), "risk.max_risks", "lots")
