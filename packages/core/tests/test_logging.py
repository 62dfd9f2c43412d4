"""Tests for structured logging configuration."""

from decimal import Decimal

import orjson
import pytest
import structlog

from tally_core import ConfigurationError, TallyConfig, configure_logging
from tally_core.logging import _orjson_serializer, get_logger


@pytest.fixture(autouse=True)
def reset_structlog():
    """Restore structlog defaults so other tests can capture logs."""
    yield
    structlog.reset_defaults()


def _processor_types() -> list[type]:
    return [type(p) for p in structlog.get_config()["processors"]]


class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_console_in_development(self):
        """Development renders human-readable console output."""
        configure_logging(TallyConfig(env="development"))

        assert structlog.dev.ConsoleRenderer in _processor_types()
        assert structlog.processors.JSONRenderer not in _processor_types()

    def test_json_in_production(self):
        """Production renders JSON lines."""
        configure_logging(TallyConfig(env="production"))

        types = _processor_types()
        assert structlog.processors.JSONRenderer in types
        assert structlog.processors.EventRenamer in types

    def test_explicit_format_wins(self):
        """log_format overrides the environment default."""
        configure_logging(TallyConfig(env="development", log_format="json"))

        assert structlog.processors.JSONRenderer in _processor_types()

    def test_level_override(self):
        """An explicit level is accepted regardless of case."""
        configure_logging(TallyConfig(env="test"), log_level="debug")

    def test_unknown_level_override(self):
        """An unknown override is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            configure_logging(TallyConfig(env="test"), log_level="verbose")

        assert exc_info.value.config_key == "TALLY_LOG_LEVEL"
        assert exc_info.value.actual == "VERBOSE"

    def test_get_logger(self):
        """get_logger returns a usable structlog logger."""
        logger = get_logger("tally_core.tests")

        assert hasattr(logger, "info")


class TestOrjsonSerializer:
    """Test suite for the JSON serializer."""

    def test_decimals_serialize_as_strings(self):
        """Money values keep their exact text in JSON logs."""
        rendered = _orjson_serializer({"message": "tax_computation_complete", "amount": Decimal("157.60")})

        assert orjson.loads(rendered) == {"message": "tax_computation_complete", "amount": "157.60"}
