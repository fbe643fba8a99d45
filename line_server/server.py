#!/usr/bin/env python3
# line_server/server.py
"""
Line Server Module

TCP listener for the line server. Every accepted connection is handed
straight to its own handler task, so a slow or idle client never delays
accepting new ones. Handles graceful shutdown on SIGINT/SIGTERM.
"""

import asyncio
import logging
import signal
from typing import Any, Dict, Optional, Set, Type

from line_server.handlers.session_handler import (
    DEFAULT_IDLE_TIMEOUT, DEFAULT_MAX_MESSAGE_LENGTH, SessionHandler
)
from line_server.log_sink import DEFAULT_LOG_DIR, ClientLogStore

# Configure logging
logger = logging.getLogger('line-server')

DEFAULT_HOST = '0.0.0.0'
DEFAULT_PORT = 4000
DEFAULT_READ_LIMIT = 64 * 1024

class LineServer:
    """
    Line server with connection handling capabilities.

    Manages the lifecycle of the listener: starting, accepting clients,
    tracking active sessions and shutting down.
    """

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT,
                 handler_class: Type[SessionHandler] = SessionHandler,
                 log_dir: str = DEFAULT_LOG_DIR,
                 idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
                 max_message_length: int = DEFAULT_MAX_MESSAGE_LENGTH,
                 read_limit: int = DEFAULT_READ_LIMIT):
        """
        Initialize the server.

        Args:
            host: Host address to bind to
            port: Port number to listen on (0 picks a free port)
            handler_class: Handler class to use for client connections
            log_dir: Directory for per-client message logs
            idle_timeout: Seconds a session may wait for a line before closing
            max_message_length: Longest message (in characters) that is acted upon
            read_limit: Stream buffer limit in bytes for a single line
        """
        self.host = host
        self.port = port
        self.handler_class = handler_class
        self.log_store = ClientLogStore(log_dir)
        self.idle_timeout = idle_timeout
        self.max_message_length = max_message_length
        self.read_limit = read_limit
        self.server: Optional[asyncio.AbstractServer] = None
        self.active_connections: Set[SessionHandler] = set()
        self.running = True

    async def listen(self) -> asyncio.AbstractServer:
        """
        Bind the listening socket and start accepting connections.

        Returns:
            The underlying asyncio server
        """
        self.server = await asyncio.start_server(
            self.handle_new_connection,
            self.host,
            self.port,
            limit=self.read_limit
        )
        addr = self.server.sockets[0].getsockname()
        self.port = addr[1]
        logger.info(f"Server listening on {addr[0]}:{addr[1]}")
        return self.server

    async def start_server(self) -> None:
        """
        Start the server and serve until shut down.

        Raises:
            OSError: If the listening socket cannot be bound
        """
        await self._setup_signal_handlers()
        await self.listen()
        try:
            async with self.server:
                await self.server.serve_forever()
        except asyncio.CancelledError:
            if self.running:
                raise
            logger.info("Server stopped accepting connections")

    async def handle_new_connection(self, reader: asyncio.StreamReader,
                                    writer: asyncio.StreamWriter) -> None:
        """
        Handle a new client connection in its own task.

        Args:
            reader: The stream reader for the client
            writer: The stream writer for the client
        """
        handler = self.handler_class(
            reader, writer,
            log_store=self.log_store,
            idle_timeout=self.idle_timeout,
            max_message_length=self.max_message_length
        )
        self.active_connections.add(handler)

        try:
            await handler.handle_client()
        except Exception as e:
            logger.error(f"Error handling client {handler.addr}: {e}")
        finally:
            self.active_connections.discard(handler)

    async def shutdown(self, grace_period: int = 5) -> None:
        """
        Gracefully shut down the server.

        Stops accepting new connections, gives active sessions up to
        grace_period seconds to finish, then closes the rest.
        """
        logger.info("Shutting down line server...")
        self.running = False

        if self.server:
            self.server.close()

        await self._wait_for_connections_to_close(grace_period)

        if self.server:
            await self.server.wait_closed()
        logger.info("Line server has shut down.")

    async def _setup_signal_handlers(self) -> None:
        try:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(
                    sig,
                    lambda: asyncio.create_task(self.shutdown())
                )
            logger.debug("Signal handlers registered for graceful shutdown")
        except (NotImplementedError, RuntimeError):
            logger.warning("Could not set up signal handlers, platform may not support them")

    async def _wait_for_connections_to_close(self, timeout: int) -> None:
        for i in range(timeout):
            if not self.active_connections:
                break
            logger.info(f"Waiting for connections to close: {len(self.active_connections)} remaining ({timeout-i}s)")
            await asyncio.sleep(1)

        if self.active_connections:
            logger.warning(f"Forcing closure of {len(self.active_connections)} remaining connections")
            await self._force_close_connections()

    async def _force_close_connections(self) -> None:
        """Close the transports of remaining sessions; each session then sees end of stream."""
        handlers = list(self.active_connections)
        for handler in handlers:
            handler.running = False
            handler.writer.close()
        for _ in range(50):
            if not self.active_connections:
                break
            await asyncio.sleep(0.1)

    def get_connection_count(self) -> int:
        return len(self.active_connections)

    def get_server_info(self) -> Dict[str, Any]:
        """
        Get information about the server.

        Returns:
            A dictionary containing server information
        """
        return {
            'type': self.__class__.__name__,
            'host': self.host,
            'port': self.port,
            'log_dir': self.log_store.log_dir,
            'idle_timeout': self.idle_timeout,
            'max_message_length': self.max_message_length,
            'connections': self.get_connection_count(),
            'running': self.running
        }
