#!/usr/bin/env python3
# line_server/log_sink.py
"""
Client Log Sink Module

Append-only per-client message logs. Each remote IP gets one file,
<log_dir>/<ip>.log. Every session opens its own append-mode handle, so
sessions sharing an IP interleave whole lines in the same file.
"""
import logging
import os
from datetime import datetime
from typing import Optional, TextIO

from line_server.errors import SessionSetupError

logger = logging.getLogger('log-sink')

DEFAULT_LOG_DIR = "logs"


def rfc3339(moment: Optional[datetime] = None) -> str:
    """
    Format a timestamp as RFC3339 with second precision.

    Naive datetimes are interpreted as local time.
    """
    if moment is None:
        moment = datetime.now()
    if moment.tzinfo is None:
        moment = moment.astimezone()
    stamp = moment.isoformat(timespec='seconds')
    if stamp.endswith('+00:00'):
        stamp = stamp[:-6] + 'Z'
    return stamp


def format_record(message: str, moment: Optional[datetime] = None) -> str:
    """Build a log record line: '[<RFC3339 timestamp>] <message>\\n'."""
    return f"[{rfc3339(moment)}] {message}\n"


class ClientLog:
    """An open, append-only log file for one session."""

    def __init__(self, path: str, stream: TextIO):
        self.path = path
        self._stream = stream

    @property
    def closed(self) -> bool:
        return self._stream.closed

    def append(self, line: str) -> None:
        """
        Append one line to the log.

        The line is written with a single write and flushed immediately so
        concurrent appenders never split each other's records.

        Raises:
            OSError: If the write fails
        """
        if not line.endswith('\n'):
            line += '\n'
        self._stream.write(line)
        self._stream.flush()

    def close(self) -> None:
        if not self._stream.closed:
            self._stream.close()
            logger.debug(f"Closed log {self.path}")


class ClientLogStore:
    """
    Opens per-client logs under a directory.

    Args:
        log_dir: Directory holding the log files, created on first open
    """

    def __init__(self, log_dir: str = DEFAULT_LOG_DIR):
        self.log_dir = log_dir

    def path_for(self, identity: str) -> str:
        return os.path.join(self.log_dir, f"{identity}.log")

    def open(self, identity: str) -> ClientLog:
        """
        Open the append-only log for a client identity (its IP address).

        Raises:
            SessionSetupError: If the directory or the file cannot be opened
        """
        try:
            os.makedirs(self.log_dir, exist_ok=True)
        except OSError as e:
            raise SessionSetupError(f"Could not create log directory {self.log_dir}: {e}") from e

        path = self.path_for(identity)
        try:
            stream = open(path, 'a', encoding='utf-8')
        except OSError as e:
            raise SessionSetupError(f"Error opening log file for {identity}: {e}") from e

        logger.debug(f"Opened log {path}")
        return ClientLog(path, stream)
