#!/usr/bin/env python3
# line_server/handlers/session_handler.py
"""
Session Handler

Owns one accepted connection from accept to close. Opens the client's
log, then reads newline-delimited messages and answers each one:

- empty line       -> "Say something..."
- hello            -> "Hi there!"
- bye              -> "Goodbye!" and close
- /time            -> current local time
- /quit            -> "Closing connection..." and close
- /echo <args>     -> the arguments joined by single spaces
- /<other>         -> "Error: Unknown command"
- anything else    -> echoed back and appended to the client's log

Messages longer than max_message_length are rejected with a one-line
error and the session continues. A session with no complete line for
idle_timeout seconds is closed.
"""
import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict, Optional

from line_server.commands import Command, CommandKind, classify, format_clock
from line_server.errors import LineTooLongError, SessionSetupError
from line_server.log_sink import ClientLog, ClientLogStore, format_record, rfc3339
from line_server.protocol_handlers.line_protocol_handler import LineProtocolHandler

logger = logging.getLogger('session-handler')

DEFAULT_IDLE_TIMEOUT = 30.0
DEFAULT_MAX_MESSAGE_LENGTH = 1024

# Replies
EMPTY_REPLY = "Say something..."
HELLO_REPLY = "Hi there!"
BYE_REPLY = "Goodbye!"
QUIT_REPLY = "Closing connection..."
TOO_LONG_REPLY = "Error: message too long"
MISSING_ECHO_REPLY = "Error: Missing message for /echo"
UNKNOWN_COMMAND_REPLY = "Error: Unknown command"


class SessionHandler(LineProtocolHandler):
    """
    Handler for one client session.

    Each dispatch method sends the reply for one kind of command.
    Whether the session continues is decided by Command.is_terminal,
    regardless of whether the reply could be written.
    """

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter,
                 log_store: Optional[ClientLogStore] = None,
                 idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
                 max_message_length: int = DEFAULT_MAX_MESSAGE_LENGTH):
        super().__init__(reader, writer)
        self.log_store = log_store or ClientLogStore()
        self.idle_timeout = idle_timeout
        self.max_message_length = max_message_length
        self.client_log: Optional[ClientLog] = None
        self._dispatch: Dict[CommandKind, Callable[[Command], Awaitable[None]]] = {
            CommandKind.EMPTY: self.on_empty,
            CommandKind.HELLO: self.on_hello,
            CommandKind.BYE: self.on_bye,
            CommandKind.TIME: self.on_time,
            CommandKind.QUIT: self.on_quit,
            CommandKind.ECHO: self.on_echo,
            CommandKind.UNKNOWN: self.on_unknown,
            CommandKind.TEXT: self.on_text,
        }

    async def on_connect(self) -> bool:
        logger.info(f"Client connected: {self.addr} at {rfc3339()}")
        try:
            self.client_log = self.log_store.open(self.host)
        except SessionSetupError as e:
            logger.error(str(e))
            return False
        return True

    async def on_timeout(self) -> None:
        logger.info(f"Client {self.addr} disconnected due to inactivity at {rfc3339()}")

    async def on_disconnect(self) -> None:
        logger.info(f"Client disconnected: {self.addr} at {rfc3339()}")

    async def on_line_too_long(self, error: LineTooLongError) -> None:
        await self.reject_oversized()

    async def reject_oversized(self) -> None:
        await self.reply(TOO_LONG_REPLY)
        logger.warning(f"Client {self.addr} sent an oversized message. Rejected.")

    async def reply(self, message: str) -> bool:
        """
        Send one reply line. Write errors are logged, never raised.

        Returns:
            bool: Whether the write succeeded.
        """
        try:
            await self.send_line(message)
        except OSError as e:
            logger.error(f"Error writing to client {self.addr}: {e}")
            return False
        return True

    async def process_line(self, line: str) -> bool:
        message = line.strip()
        if len(message) > self.max_message_length:
            await self.reject_oversized()
            return True

        command = classify(message)
        logger.debug(f"Received {command.kind.value} from {self.addr}")
        await self._dispatch[command.kind](command)
        if command.is_terminal:
            logger.info(f"Client {self.addr} sent '{command.text}', closing connection")
            return False
        return True

    async def on_empty(self, command: Command) -> None:
        await self.reply(EMPTY_REPLY)

    async def on_hello(self, command: Command) -> None:
        await self.reply(HELLO_REPLY)

    async def on_bye(self, command: Command) -> None:
        await self.reply(BYE_REPLY)

    async def on_time(self, command: Command) -> None:
        await self.reply(format_clock(datetime.now()))

    async def on_quit(self, command: Command) -> None:
        await self.reply(QUIT_REPLY)

    async def on_echo(self, command: Command) -> None:
        if command.args:
            await self.reply(" ".join(command.args))
        else:
            await self.reply(MISSING_ECHO_REPLY)

    async def on_unknown(self, command: Command) -> None:
        await self.reply(UNKNOWN_COMMAND_REPLY)

    async def on_text(self, command: Command) -> None:
        await self.reply(command.text)
        self.record(command.text)

    def record(self, message: str) -> None:
        """Append a timestamped record to the client's log; failures are logged."""
        if self.client_log is None:
            return
        try:
            self.client_log.append(format_record(message))
        except OSError as e:
            logger.error(f"Error writing log for {self.host}: {e}")

    async def cleanup(self) -> None:
        if self.client_log is not None:
            try:
                self.client_log.close()
            except OSError as e:
                logger.error(f"Error closing log for {self.host}: {e}")
        await super().cleanup()
