"""
Unit tests for YAML configuration handling.
"""

import pytest

from line_server.errors import ConfigError
from line_server.server import LineServer
from line_server.server_config import DEFAULTS, ServerConfig


def write_config(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return str(path)


class TestLoadConfig:
    """Tests for ServerConfig.load_config()."""

    def test_defaults_filled_in(self, tmp_path):
        config = ServerConfig.load_config(write_config(tmp_path, "port: 5000\n"))
        assert config['port'] == 5000
        assert config['host'] == '0.0.0.0'
        assert config['idle_timeout'] == 30.0
        assert config['max_message_length'] == 1024
        assert config['log_dir'] == 'logs'

    def test_empty_file(self, tmp_path):
        assert ServerConfig.load_config(write_config(tmp_path, "")) == DEFAULTS

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ServerConfig.load_config(str(tmp_path / "missing.yaml"))

    def test_not_a_mapping(self, tmp_path):
        with pytest.raises(ConfigError):
            ServerConfig.load_config(write_config(tmp_path, "- a\n- b\n"))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigError):
            ServerConfig.load_config(write_config(tmp_path, "port: [1, 2\n"))

    def test_unknown_fields_ignored(self, tmp_path):
        config = ServerConfig.load_config(write_config(tmp_path, "colour: blue\n"))
        assert 'colour' not in config

    def test_round_trip_through_save(self, tmp_path):
        config = ServerConfig.create_default_config()
        config['idle_timeout'] = 12.5
        path = str(tmp_path / "saved.yaml")
        ServerConfig.save_config(config, path)
        assert ServerConfig.load_config(path) == config


class TestValidateConfig:
    """Tests for ServerConfig.validate_config()."""

    @pytest.mark.parametrize("field,value", [
        ('port', 70000),
        ('port', -1),
        ('port', "4000"),
        ('port', True),
        ('host', ""),
        ('log_dir', None),
        ('idle_timeout', 0),
        ('idle_timeout', "30"),
        ('max_message_length', -5),
        ('max_message_length', 10.5),
        ('read_limit', 0),
    ])
    def test_invalid(self, field, value):
        config = ServerConfig.create_default_config()
        config[field] = value
        with pytest.raises(ConfigError):
            ServerConfig.validate_config(config)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            ServerConfig.validate_config({'port': 99999})

    def test_defaults_are_valid(self):
        ServerConfig.validate_config(ServerConfig.create_default_config())


class TestCreateServer:
    """Tests for ServerConfig.create_server_from_config()."""

    def test_server_settings(self):
        server = ServerConfig.create_server_from_config({
            'port': 4100, 'log_dir': 'client-logs', 'idle_timeout': 10,
        })
        assert isinstance(server, LineServer)
        assert server.port == 4100
        assert server.host == '0.0.0.0'
        assert server.log_store.log_dir == 'client-logs'
        assert server.idle_timeout == 10
        assert server.max_message_length == 1024
