"""
Tests for Configuration Module
"""

import argparse
import os
import tempfile

from loguru import logger

from sqsp_to_shopify.config import INPUT_ENV, OUTPUT_ENV, load_config, resolve_settings


def make_args(**overrides):
    values = {
        'input': None, 'output': None, 'encoding': None,
        'atomic': False, 'validate': False, 'verbose': False,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


class TestConfig:
    """Test cases for configuration loading."""

    def setup_method(self):
        """Set up test fixtures."""
        self.messages = []
        self.sink_id = logger.add(self.messages.append, level="WARNING", format="{message}")

    def teardown_method(self):
        logger.remove(self.sink_id)

    def test_load_yaml(self):
        """Test values are read from the YAML file."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("output:\n  atomic: true\nlogging:\n  level: debug\n")
            config_path = f.name

        try:
            config = load_config(config_path)
            assert config['output']['atomic'] is True
        finally:
            if os.path.exists(config_path):
                os.unlink(config_path)

    def test_missing_file_warns(self):
        """Test a missing requested config file logs a warning."""
        assert load_config('/nonexistent/config.yaml') == {}
        assert any("Config file not found" in m for m in self.messages)

    def test_missing_default_is_silent(self):
        """Test a missing default config file is not reported."""
        assert load_config('/nonexistent/config.yaml', warn_missing=False) == {}
        assert self.messages == []

    def test_precedence(self, monkeypatch):
        """Test arguments win over the environment, which wins over the config file."""
        monkeypatch.setenv(INPUT_ENV, "env.json")
        monkeypatch.setenv(OUTPUT_ENV, "env.csv")
        config = {'files': {'input': 'cfg.json', 'output': 'cfg.csv'}, 'logging': {'level': 'warning'}}

        settings = resolve_settings(make_args(output="arg.csv"), config)

        assert settings['input'] == "env.json"
        assert settings['output'] == "arg.csv"
        assert settings['encoding'] == "utf-8"
        assert settings['log_level'] == "WARNING"

    def test_defaults(self, monkeypatch):
        """Test built-in defaults."""
        monkeypatch.delenv(INPUT_ENV, raising=False)
        monkeypatch.delenv(OUTPUT_ENV, raising=False)

        settings = resolve_settings(make_args(verbose=True), {})

        assert settings['input'] is None
        assert settings['output'] == "-"
        assert settings['atomic'] is False
        assert settings['log_level'] == "DEBUG"
