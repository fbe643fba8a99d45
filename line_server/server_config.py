#!/usr/bin/env python3
# line_server/server_config.py
"""
Server Configuration Module

Loads, validates and saves line server configurations stored as YAML.

Example:

    host: 0.0.0.0
    port: 4000
    log_dir: logs
    idle_timeout: 30
    max_message_length: 1024
"""
import os
import yaml
import logging
from typing import Dict, Any

from line_server.errors import ConfigError
from line_server.handlers.session_handler import DEFAULT_IDLE_TIMEOUT, DEFAULT_MAX_MESSAGE_LENGTH
from line_server.log_sink import DEFAULT_LOG_DIR
from line_server.server import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_READ_LIMIT, LineServer

logger = logging.getLogger('server-config')

DEFAULTS: Dict[str, Any] = {
    'host': DEFAULT_HOST,
    'port': DEFAULT_PORT,
    'log_dir': DEFAULT_LOG_DIR,
    'idle_timeout': DEFAULT_IDLE_TIMEOUT,
    'max_message_length': DEFAULT_MAX_MESSAGE_LENGTH,
    'read_limit': DEFAULT_READ_LIMIT,
}

class ServerConfig:
    """
    Manages server configuration from YAML files.

    Provides static methods for loading, validating, saving and turning a
    configuration into a server instance.
    """

    @staticmethod
    def load_config(config_file: str) -> Dict[str, Any]:
        """
        Load configuration from a YAML file, filling in defaults.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigError: If the file is not valid YAML or holds an invalid configuration
        """
        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Config file not found: {config_file}")

        try:
            with open(config_file, 'r') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing config file: {e}")

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError("Configuration must be a dictionary")

        unknown = sorted(set(loaded) - set(DEFAULTS))
        if unknown:
            logger.warning(f"Ignoring unknown config fields: {', '.join(unknown)}")

        config = dict(DEFAULTS)
        for key in DEFAULTS:
            if key in loaded:
                config[key] = loaded[key]
            else:
                logger.debug(f"Using default {key}: {DEFAULTS[key]}")

        ServerConfig.validate_config(config)
        return config

    @staticmethod
    def validate_config(config: Dict[str, Any]) -> None:
        """
        Validate a configuration dictionary.

        Raises:
            ConfigError: On the first invalid field
        """
        host = config.get('host', DEFAULT_HOST)
        if not isinstance(host, str) or not host:
            raise ConfigError(f"Invalid host: {host!r}")

        port = config.get('port', DEFAULT_PORT)
        if isinstance(port, bool) or not isinstance(port, int) or port < 0 or port > 65535:
            raise ConfigError(f"Invalid port number: {port}. Must be between 0 and 65535.")

        log_dir = config.get('log_dir', DEFAULT_LOG_DIR)
        if not isinstance(log_dir, str) or not log_dir:
            raise ConfigError(f"Invalid log_dir: {log_dir!r}")

        for numeric_field in ['idle_timeout', 'max_message_length', 'read_limit']:
            if numeric_field in config:
                value = config[numeric_field]
                if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                    raise ConfigError(f"{numeric_field} must be a positive number")

        for integer_field in ['max_message_length', 'read_limit']:
            if integer_field in config and not isinstance(config[integer_field], int):
                raise ConfigError(f"{integer_field} must be an integer")

    @staticmethod
    def create_server_from_config(config: Dict[str, Any]) -> LineServer:
        """
        Create a server instance from the configuration.
        """
        merged = dict(DEFAULTS)
        merged.update(config)
        return LineServer(
            host=merged['host'],
            port=merged['port'],
            log_dir=merged['log_dir'],
            idle_timeout=merged['idle_timeout'],
            max_message_length=merged['max_message_length'],
            read_limit=merged['read_limit']
        )

    @staticmethod
    def save_config(config: Dict[str, Any], filename: str) -> None:
        """
        Save configuration to a YAML file.
        """
        try:
            with open(filename, 'w') as f:
                yaml.safe_dump(config, f, default_flow_style=False)
            logger.info(f"Configuration saved to {filename}")
        except IOError as e:
            logger.error(f"Error saving configuration to {filename}: {e}")
            raise

    @staticmethod
    def create_default_config() -> Dict[str, Any]:
        """
        Create a default configuration dictionary.
        """
        return dict(DEFAULTS)
