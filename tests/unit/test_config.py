"""Tests for configuration and profile loading.

Uses isolated directories via tmp_path and MXFIN_CONFIG_PATH
to avoid touching the user's real configuration.
"""

import json

import pytest
import yaml
from pydantic import ValidationError

from mxfin.sdk.config import (
    ProfileNotFoundError,
    get_config_dir,
    get_profile_path,
    get_profile_value,
    get_setting,
    load_plan_settings,
    load_profile,
    load_profile_investments,
    set_profile_value,
    set_setting,
)
from mxfin.sdk.schemas import InvestmentType


# === FIXTURES ===


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point the SDK at an empty config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("MXFIN_CONFIG_PATH", str(config_dir))
    return config_dir


def write_profile(config_dir, profile_data: dict):
    (config_dir / "profile.yaml").write_text(yaml.dump(profile_data))


# === TESTS ===


class TestConfigDir:
    """Tests for config directory resolution."""

    def test_env_override(self, isolated_config):
        assert get_config_dir() == isolated_config

    def test_xdg_fallback(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MXFIN_CONFIG_PATH", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_dir() == tmp_path / "mx-fin"


class TestSettings:
    """Tests for settings.json."""

    def test_missing_settings_default(self, isolated_config):
        assert get_setting("profile") is None
        assert get_setting("profile", "x") == "x"

    def test_set_and_get(self, isolated_config):
        set_setting("profile", "/tmp/elsewhere.yaml")
        assert get_setting("profile") == "/tmp/elsewhere.yaml"
        saved = json.loads((isolated_config / "settings.json").read_text())
        assert saved == {"profile": "/tmp/elsewhere.yaml"}

    def test_profile_path_from_settings(self, isolated_config, tmp_path):
        custom = tmp_path / "custom.yaml"
        set_setting("profile", str(custom))
        assert get_profile_path() == custom


class TestProfile:
    """Tests for profile.yaml loading and dot-notation access."""

    def test_required_profile_missing(self, isolated_config):
        with pytest.raises(ProfileNotFoundError):
            load_profile()

    def test_configured_profile_missing(self, isolated_config, tmp_path):
        set_setting("profile", str(tmp_path / "gone" / "profile.yaml"))
        with pytest.raises(ProfileNotFoundError, match="configured path"):
            load_profile()

    def test_optional_profile_missing(self, isolated_config):
        assert load_profile(require_exists=False) == {}

    def test_set_creates_nested_sections(self, isolated_config):
        set_profile_value("plan.retirement_current_age", 35)
        assert get_profile_value("plan.retirement_current_age") == 35
        assert get_profile_value("plan.missing", "default") == "default"

        saved = yaml.safe_load((isolated_config / "profile.yaml").read_text())
        assert saved == {"plan": {"retirement_current_age": 35}}


class TestPlanSettings:
    """Tests for load_plan_settings()."""

    def test_defaults_without_profile(self, isolated_config):
        plan = load_plan_settings()
        assert plan.emergency_target_months == 6
        assert plan.longterm_annual_return == 8
        assert plan.retirement_current_age == 30
        assert plan.retirement_target_age == 65
        assert plan.retirement_expected_return == 7

    def test_profile_values(self, isolated_config):
        write_profile(isolated_config, {"plan": {"longterm_monthly_expenses": 15000}})
        assert load_plan_settings().longterm_monthly_expenses == 15000

    def test_overrides_win(self, isolated_config):
        write_profile(isolated_config, {"plan": {"retirement_current_age": 40}})
        plan = load_plan_settings(retirement_current_age=45, retirement_target_age=None)
        assert plan.retirement_current_age == 45
        assert plan.retirement_target_age == 65

    def test_unknown_key_rejected(self, isolated_config):
        write_profile(isolated_config, {"plan": {"retirment_age": 40}})
        with pytest.raises(ValidationError):
            load_plan_settings()

    def test_negative_amount_rejected(self, isolated_config):
        with pytest.raises(ValidationError):
            load_plan_settings(emergency_current_savings=-1)

    def test_settings_are_immutable(self, isolated_config):
        plan = load_plan_settings()
        with pytest.raises(ValidationError):
            plan.retirement_current_age = 50


class TestProfileInvestments:
    """Tests for load_profile_investments()."""

    def test_none(self, isolated_config):
        assert load_profile_investments() == []

    def test_listed(self, isolated_config):
        write_profile(isolated_config, {
            "investments": [
                {"name": "VOO", "type": "etf", "amount": 50000, "expected_return": 10},
                {"name": "Afore", "type": "afore", "amount": 120000},
            ]
        })
        investments = load_profile_investments()
        assert [i.type for i in investments] == [InvestmentType.ETF, InvestmentType.AFORE]
        assert investments[1].expected_return == 8
