"""Tests for runtime configuration."""

from pathlib import Path

import pytest

import trinitty
from trinitty.config import DEFAULT_TICK_RATE, RuntimeConfig
from trinitty.errors import ConfigError, TrinittyError


class TestRuntimeConfig:

    def test_defaults(self) -> None:
        config = RuntimeConfig()
        assert config.tick_rate == DEFAULT_TICK_RATE == 0.1
        assert config.version == trinitty.__version__
        assert config.log_file is None
        assert config.tick_rate_ns == 100_000_000

    def test_immutable(self) -> None:
        config = RuntimeConfig()
        with pytest.raises(AttributeError):
            config.tick_rate = 1.0

    @pytest.mark.parametrize("value", [0, -0.5])
    def test_rejects_non_positive_tick_rate(self, value) -> None:
        with pytest.raises(ConfigError):
            RuntimeConfig(tick_rate=value)

    def test_from_env_defaults(self) -> None:
        assert RuntimeConfig.from_env({}) == RuntimeConfig()

    def test_from_env_overrides(self, tmp_path) -> None:
        config = RuntimeConfig.from_env({
            "TRINITTY_TICK_RATE": "0.25",
            "TRINITTY_LOG_FILE": str(tmp_path / "t.log"),
        })
        assert config.tick_rate == 0.25
        assert config.log_file == Path(tmp_path / "t.log")

    def test_from_env_bad_number(self) -> None:
        with pytest.raises(ConfigError, match="TRINITTY_TICK_RATE"):
            RuntimeConfig.from_env({"TRINITTY_TICK_RATE": "fast"})

    @pytest.mark.parametrize("raw", ["inf", "-inf", "nan"])
    def test_from_env_rejects_non_finite(self, raw) -> None:
        with pytest.raises(ConfigError):
            RuntimeConfig.from_env({"TRINITTY_TICK_RATE": raw})

    def test_rejects_sub_nanosecond_tick_rate(self) -> None:
        with pytest.raises(ConfigError, match="nanosecond"):
            RuntimeConfig.from_env({"TRINITTY_TICK_RATE": "1e-12"})

    def test_one_nanosecond_is_allowed(self) -> None:
        assert RuntimeConfig(tick_rate=1e-9).tick_rate_ns == 1

    def test_config_error_is_fatal_kind(self) -> None:
        assert issubclass(ConfigError, TrinittyError)


class TestLogging:

    def test_no_path_no_handler(self) -> None:
        from trinitty.log import configure_logging
        assert configure_logging(None) is None

    def test_file_handler(self, tmp_path) -> None:
        import logging

        from trinitty.log import configure_logging

        path = tmp_path / "trinitty.log"
        handler = configure_logging(path)
        try:
            logging.getLogger("trinitty.cli.core.events").debug("producer started")
            handler.flush()
            text = path.read_text(encoding="utf-8")
        finally:
            logging.getLogger("trinitty").removeHandler(handler)
            handler.close()
        assert "producer started" in text
        assert "MainThread" in text
