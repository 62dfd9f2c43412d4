"""Tests for the configuration system."""

from decimal import Decimal

import pytest

from tally_core.config import AdvisoryConfig, TallyConfig


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep TALLY_* variables from the developer's shell out of these tests."""
    for name in (
        "TALLY_ENV",
        "TALLY_LOG_LEVEL",
        "TALLY_LOG_FORMAT",
        "TALLY_ADVISORY_BALANCE_WARNING_RATIO",
        "TALLY_ADVISORY_DEDUCTION_SUGGESTION_RATIO",
        "TALLY_ADVISORY_EFFECTIVE_RATE_SUGGESTION_THRESHOLD",
    ):
        monkeypatch.delenv(name, raising=False)


class TestAdvisoryConfig:
    """Test suite for AdvisoryConfig."""

    def test_default_values(self):
        """AdvisoryConfig should have sensible defaults."""
        config = AdvisoryConfig()

        assert config.balance_warning_ratio == Decimal("0.10")
        assert config.deduction_suggestion_ratio == Decimal("0.10")
        assert config.effective_rate_suggestion_threshold == Decimal("0.25")

    def test_custom_values(self):
        """AdvisoryConfig should accept custom values."""
        config = AdvisoryConfig(
            balance_warning_ratio=Decimal("0.2"),
            effective_rate_suggestion_threshold=Decimal("0.3"),
        )

        assert config.balance_warning_ratio == Decimal("0.2")
        assert config.effective_rate_suggestion_threshold == Decimal("0.3")

    def test_ratio_validation(self):
        """Ratios should be between 0 and 1."""
        AdvisoryConfig(balance_warning_ratio=Decimal("0"))
        AdvisoryConfig(balance_warning_ratio=Decimal("1"))

        with pytest.raises(ValueError):
            AdvisoryConfig(balance_warning_ratio=Decimal("-0.1"))

        with pytest.raises(ValueError):
            AdvisoryConfig(deduction_suggestion_ratio=Decimal("1.5"))

    def test_from_environment(self, monkeypatch):
        """AdvisoryConfig should load from environment variables."""
        monkeypatch.setenv("TALLY_ADVISORY_BALANCE_WARNING_RATIO", "0.15")
        monkeypatch.setenv("TALLY_ADVISORY_EFFECTIVE_RATE_SUGGESTION_THRESHOLD", "0.4")

        config = AdvisoryConfig()

        assert config.balance_warning_ratio == Decimal("0.15")
        assert config.effective_rate_suggestion_threshold == Decimal("0.4")


class TestTallyConfig:
    """Test suite for TallyConfig."""

    def test_default_values(self):
        """TallyConfig should have sensible defaults."""
        config = TallyConfig()

        assert config.env == "development"
        assert config.log_level == "INFO"
        assert config.log_format is None
        assert isinstance(config.advisory, AdvisoryConfig)

    def test_env_validation(self):
        """Environment should be validated and normalized."""
        assert TallyConfig(env="Production").env == "production"
        assert TallyConfig(env=" test ").env == "test"

        with pytest.raises(ValueError):
            TallyConfig(env="invalid")

    def test_log_level_validation(self):
        """Log level should be validated and normalized."""
        assert TallyConfig(log_level="debug").log_level == "DEBUG"

        with pytest.raises(ValueError):
            TallyConfig(log_level="verbose")

    def test_log_format_validation(self):
        """Log format should be console or json."""
        assert TallyConfig(log_format="JSON").log_format == "json"

        with pytest.raises(ValueError):
            TallyConfig(log_format="xml")

    def test_environment_properties(self):
        """Environment helpers should reflect env and log level."""
        dev = TallyConfig(env="development", log_level="DEBUG")
        prod = TallyConfig(env="production")

        assert dev.is_development is True
        assert dev.is_production is False
        assert dev.is_debug is True
        assert prod.is_production is True
        assert prod.is_debug is False

    def test_use_json_logs(self):
        """JSON logs follow the environment unless a format is set."""
        assert TallyConfig(env="development").use_json_logs is False
        assert TallyConfig(env="production").use_json_logs is True
        assert TallyConfig(env="production", log_format="console").use_json_logs is False
        assert TallyConfig(env="development", log_format="json").use_json_logs is True

    def test_from_environment(self, monkeypatch):
        """TallyConfig should load from environment variables."""
        monkeypatch.setenv("TALLY_ENV", "staging")
        monkeypatch.setenv("TALLY_LOG_LEVEL", "warning")
        monkeypatch.setenv("TALLY_ADVISORY_DEDUCTION_SUGGESTION_RATIO", "0.05")

        config = TallyConfig()

        assert config.env == "staging"
        assert config.log_level == "WARNING"
        assert config.advisory.deduction_suggestion_ratio == Decimal("0.05")

    def test_nested_advisory_override(self):
        """Advisory thresholds can be passed in directly."""
        config = TallyConfig(advisory=AdvisoryConfig(balance_warning_ratio=Decimal("0.5")))

        assert config.advisory.balance_warning_ratio == Decimal("0.5")
