"""Unit tests for configuration loading."""
import pytest

from actiontrack.config import (
    CATEGORY_PALETTE,
    TrackerConfig,
    get_env_config,
    load_tracker_config,
)


@pytest.mark.parametrize("env, level, strict", [
    ("production", "WARNING", True),
    ("staging", "INFO", True),
    ("development", "DEBUG", False),
])
def test_environments(env, level, strict):
    config = load_tracker_config(env)
    assert isinstance(config, TrackerConfig)
    assert config.log_level == level
    assert config.strict_validation is strict
    assert config.analytics.palette == CATEGORY_PALETTE
    assert config.analytics.weekly_bucket_limit == 8
    assert ".xlsm" in config.imports.accepted_extensions


def test_unknown_environment():
    with pytest.raises(ValueError):
        load_tracker_config("qa")


def test_overrides():
    config = load_tracker_config("production", {
        "weekly_bucket_limit": 4,
        "skip_duplicates": True,
        "palette": ["#111", "#222"],
        "log_level": "debug",
    })
    assert config.analytics.weekly_bucket_limit == 4
    assert config.analytics.palette == ("#111", "#222")
    assert config.imports.skip_duplicates is True
    assert config.log_level == "DEBUG"
    assert config.strict_validation is True


def test_unknown_override_key():
    with pytest.raises(ValueError):
        load_tracker_config("production", {"colour": "red"})


def test_empty_palette_rejected():
    with pytest.raises(ValueError):
        load_tracker_config("production", {"palette": []})


def test_get_env_config(tmp_path):
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text('[tool.actiontrack]\nunspecified_label = "Belirtilmemiş"\n', encoding="utf-8")
    assert get_env_config(pyproject) == {"unspecified_label": "Belirtilmemiş"}
    assert get_env_config(tmp_path / "missing.toml") == {}
