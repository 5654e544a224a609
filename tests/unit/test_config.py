"""Tests for config directory, settings.json and plan resolution."""

import json

import pytest

from payplan.sdk.config import (
    KNOWN_SETTINGS,
    PlanNotFoundError,
    get_config_dir,
    get_plan_path,
    get_setting,
    load_plan,
    load_settings,
    save_plan,
    set_setting,
    unset_setting,
)


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point the SDK at an empty config directory."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("PAY_PLAN_CONFIG_PATH", str(config_dir))
    return {"config_dir": config_dir, "tmp_path": tmp_path}


class TestConfigDir:
    """PAY_PLAN_CONFIG_PATH first, then XDG."""

    def test_env_override(self, isolated_env):
        assert get_config_dir() == isolated_env["config_dir"]

    def test_xdg_fallback(self, tmp_path, monkeypatch):
        monkeypatch.delenv("PAY_PLAN_CONFIG_PATH", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

        assert get_config_dir() == tmp_path / "xdg" / "pay-plan"

    def test_empty_xdg_uses_home(self, tmp_path, monkeypatch):
        monkeypatch.delenv("PAY_PLAN_CONFIG_PATH", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", "")
        monkeypatch.setenv("HOME", str(tmp_path))

        assert get_config_dir() == tmp_path / ".config" / "pay-plan"


class TestSettings:
    """settings.json read/write with per-key defaults."""

    def test_missing_file_is_empty(self, isolated_env):
        assert load_settings() == {}
        assert get_setting("tax_year") == KNOWN_SETTINGS["tax_year"]

    def test_set_creates_directory_and_file(self, isolated_env):
        path = set_setting("output_format", "csv")

        assert path == isolated_env["config_dir"] / "settings.json"
        assert json.loads(path.read_text()) == {"output_format": "csv"}
        assert get_setting("output_format") == "csv"

    def test_set_keeps_other_keys(self, isolated_env):
        set_setting("output_format", "csv")
        set_setting("tax_year", 2025)

        assert load_settings() == {"output_format": "csv", "tax_year": 2025}

    def test_unset(self, isolated_env):
        set_setting("tax_year", 2025)

        assert unset_setting("tax_year") is True
        assert unset_setting("tax_year") is False
        assert get_setting("tax_year") == 2026

    def test_explicit_default(self, isolated_env):
        assert get_setting("not_a_setting", "fallback") == "fallback"


class TestPlanPath:
    """settings.json 'plan' key, else plan.yaml in the config directory."""

    def test_default_location(self, isolated_env):
        assert get_plan_path() == isolated_env["config_dir"] / "plan.yaml"

    def test_configured_location(self, isolated_env):
        custom = isolated_env["tmp_path"] / "elsewhere.yaml"
        set_setting("plan", str(custom))

        assert get_plan_path() == custom

    def test_require_exists(self, isolated_env):
        with pytest.raises(PlanNotFoundError, match="pay-plan plan init"):
            get_plan_path(require_exists=True)

    def test_configured_but_missing(self, isolated_env):
        set_setting("plan", str(isolated_env["tmp_path"] / "gone.yaml"))

        with pytest.raises(PlanNotFoundError, match="configured path"):
            get_plan_path(require_exists=True)

    def test_save_and_load_plan(self, isolated_env):
        path = save_plan({"annual_base_salary": 90000, "bonus_month": "June"})

        assert path.exists()
        assert load_plan() == {"annual_base_salary": 90000, "bonus_month": "June"}
