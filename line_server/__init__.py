#!/usr/bin/env python3
# line_server/__init__.py
"""
Line Server

A line-oriented TCP server: reads newline-delimited messages, answers a
small command grammar and logs plain-text messages per client IP.
"""
from line_server.commands import Command, CommandKind, classify
from line_server.errors import ConfigError, LineServerError, LineTooLongError, SessionSetupError
from line_server.handlers.session_handler import SessionHandler
from line_server.log_sink import ClientLog, ClientLogStore
from line_server.server import LineServer
from line_server.server_config import ServerConfig

__version__ = "0.1.0"

__all__ = [
    'Command',
    'CommandKind',
    'classify',
    'ClientLog',
    'ClientLogStore',
    'ConfigError',
    'LineServer',
    'LineServerError',
    'LineTooLongError',
    'ServerConfig',
    'SessionHandler',
    'SessionSetupError',
]
