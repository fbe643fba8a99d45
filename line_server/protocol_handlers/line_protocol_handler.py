#!/usr/bin/env python3
# line_server/protocol_handlers/line_protocol_handler.py
"""
Line-based Protocol Handler Module

Provides a handler for newline-delimited communication. This class
inherits from BaseProtocolHandler and runs the read-process loop: one
line is fully processed before the next read starts, and every read is
bounded by an idle timeout.
"""
import asyncio
import logging
from typing import Optional

# imports
from line_server.errors import LineTooLongError
from line_server.protocol_handlers.base_protocol_handler import BaseProtocolHandler

line_logger = logging.getLogger('line-protocol')

NEWLINE = b'\n'

class LineProtocolHandler(BaseProtocolHandler):
    """
    Line-based protocol handler for traditional line-oriented communication.

    Subclasses override the hooks (on_connect, process_line, on_timeout,
    on_disconnect, on_line_too_long) to implement specific logic.
    """

    idle_timeout: float = 300

    async def read_line(self, timeout: Optional[float] = None) -> Optional[str]:
        """
        Read one complete line from the client.

        Args:
            timeout (Optional[float]): Maximum time to wait for the line;
                defaults to idle_timeout. The window restarts on every call.

        Returns:
            Optional[str]: The line without surrounding whitespace, or None
                if the peer closed the connection (a trailing line without
                a newline is discarded).

        Raises:
            asyncio.TimeoutError: If no full line arrived in time.
            LineTooLongError: If the line overran the stream buffer limit;
                the line has been drained from the stream.
            OSError: On transport read errors.
        """
        if timeout is None:
            timeout = self.idle_timeout
        data = await asyncio.wait_for(self._read_until_newline(), timeout=timeout)
        if data is None:
            return None
        return data.decode('utf-8', errors='replace').strip()

    async def _read_until_newline(self) -> Optional[bytes]:
        try:
            return await self.reader.readuntil(NEWLINE)
        except asyncio.IncompleteReadError:
            return None
        except asyncio.LimitOverrunError as e:
            overrun = e.consumed
        size = await self._discard_line(overrun)
        if size is None:
            return None
        raise LineTooLongError(size)

    async def _discard_line(self, consumed: int) -> Optional[int]:
        """Drop the rest of an overlong line; returns its size, or None on EOF."""
        size = 0
        while True:
            try:
                await self.reader.readexactly(consumed)
                size += consumed
                tail = await self.reader.readuntil(NEWLINE)
            except asyncio.IncompleteReadError:
                return None
            except asyncio.LimitOverrunError as e:
                consumed = e.consumed
                continue
            return size + len(tail)

    async def handle_client(self) -> None:
        """
        Run the read-process loop until a hook asks to stop.

        The connection is always cleaned up on exit.
        """
        try:
            if not await self.on_connect():
                return
            while self.running:
                try:
                    line = await self.read_line()
                except asyncio.TimeoutError:
                    await self.on_timeout()
                    break
                except LineTooLongError as e:
                    await self.on_line_too_long(e)
                    continue
                except OSError as e:
                    line_logger.error(f"Error from {self.addr}: {e}")
                    break

                if line is None:
                    await self.on_disconnect()
                    break
                if not await self.process_line(line):
                    break
        finally:
            await self.cleanup()

    async def on_connect(self) -> bool:
        """Prepare the session; return False to close it before reading."""
        return True

    async def on_timeout(self) -> None:
        line_logger.info(f"Client {self.addr} timed out")

    async def on_disconnect(self) -> None:
        line_logger.info(f"Client {self.addr} disconnected")

    async def on_line_too_long(self, error: LineTooLongError) -> None:
        line_logger.warning(f"Client {self.addr}: {error}")

    async def process_line(self, line: str) -> bool:
        """
        Process a single line of input.

        Args:
            line (str): The line of text to process.

        Returns:
            bool: True to keep reading, False to close the connection.
        """
        raise NotImplementedError("Subclasses must implement specific line processing logic")
