"""Tests for configuration and logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from optionview.config import DEFAULT_CONFIG, create_template_config, load_config
from optionview.logger import setup_logging


class TestLoadConfig:
    """Config file loading with defaults."""

    def test_missing_file_returns_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.toml")

        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG

    def test_partial_file_is_merged(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[payoff]\nsteps = 400\n\n[display]\ncurrency = "€"\n', encoding="utf-8")

        config = load_config(path)

        assert config["payoff"]["steps"] == 400
        assert config["payoff"]["table_rows"] == DEFAULT_CONFIG["payoff"]["table_rows"]
        assert config["display"]["currency"] == "€"
        assert config["logging"]["level"] == "WARNING"

    def test_unreadable_file_returns_defaults(self, tmp_path, caplog):
        path = tmp_path / "config.toml"
        path.write_text("[payoff\nsteps = ", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="optionview.config"):
            config = load_config(path)

        assert config == DEFAULT_CONFIG
        assert "Ignoring unreadable config" in caplog.text

    def test_defaults_are_not_mutated(self, tmp_path):
        config = load_config(tmp_path / "missing.toml")
        config["payoff"]["steps"] = 5

        assert DEFAULT_CONFIG["payoff"]["steps"] == 100


class TestTemplateConfig:
    """Writing the default config file."""

    def test_template_round_trips(self, tmp_path):
        path = create_template_config(tmp_path / "nested" / "config.toml")

        assert path.exists()
        assert load_config(path) == DEFAULT_CONFIG


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Root logger configuration."""

    def test_level_names(self, restore_root_logger):
        setup_logging("debug")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0], RichHandler)

    def test_unknown_level_falls_back_to_warning(self, restore_root_logger):
        setup_logging("chatty")

        assert restore_root_logger.level == logging.WARNING

    def test_numeric_level(self, restore_root_logger):
        setup_logging(logging.ERROR)

        assert restore_root_logger.level == logging.ERROR


class TestMalformedValues:
    """Values of the wrong type fall back to their defaults."""

    def test_scalar_in_place_of_table(self, tmp_path, caplog):
        path = tmp_path / "config.toml"
        path.write_text('logging = "DEBUG"\n\n[payoff]\nsteps = 250\n', encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="optionview.config"):
            config = load_config(path)

        assert config["logging"] == DEFAULT_CONFIG["logging"]
        assert config["payoff"]["steps"] == 250
        assert "logging" in caplog.text

    def test_wrong_scalar_type(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[payoff]\nsteps = "many"\ntable_rows = 11\n', encoding="utf-8")

        config = load_config(path)

        assert config["payoff"]["steps"] == 100
        assert config["payoff"]["table_rows"] == 11

    def test_unknown_keys_are_kept(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[display]\ntheme = "dark"\n', encoding="utf-8")

        config = load_config(path)

        assert config["display"]["theme"] == "dark"
        assert config["display"]["currency"] == "$"
