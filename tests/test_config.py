"""
Tests for environment configuration and logging bootstrap.
"""

import logging

from freight_tracker import config


class TestIntEnv:

    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("FT_TEST_TIMEOUT", raising=False)
        assert config._int_env("FT_TEST_TIMEOUT", 10) == 10

    def test_reads_value(self, monkeypatch):
        monkeypatch.setenv("FT_TEST_TIMEOUT", "25")
        assert config._int_env("FT_TEST_TIMEOUT", 10) == 25

    def test_invalid_value_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv("FT_TEST_TIMEOUT", "soon")
        with caplog.at_level(logging.WARNING):
            assert config._int_env("FT_TEST_TIMEOUT", 10) == 10
        assert "FT_TEST_TIMEOUT" in caplog.text


class TestConfigureLogging:

    def test_idempotent(self):
        package_logger = config.configure_logging("DEBUG")
        config.configure_logging("WARNING")

        ours = [h for h in package_logger.handlers if getattr(h, "_freight_tracker", False)]
        assert len(ours) == 1
        assert package_logger.level == logging.WARNING
