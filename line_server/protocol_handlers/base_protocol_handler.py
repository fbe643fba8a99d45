#!/usr/bin/env python3
# line_server/protocol_handlers/base_protocol_handler.py
"""
Base Protocol Handler Module

Provides the BaseProtocolHandler class with the functionality shared by
every connection handler: peer identity, sending lines and cleanup.
"""

import asyncio
import logging

logger = logging.getLogger('base-protocol')

class BaseProtocolHandler:
    """
    Base protocol handler owning one client connection.
    """

    line_ending = "\n"

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """
        Initialize the base protocol handler.

        Args:
            reader (asyncio.StreamReader): Input stream for reading data.
            writer (asyncio.StreamWriter): Output stream for writing data.
        """
        self.reader = reader
        self.writer = writer
        self.running = True

        peername = writer.get_extra_info('peername')
        if peername:
            self.host, self.port = peername[0], peername[1]
        else:
            self.host, self.port = 'unknown', 0

    @property
    def addr(self) -> str:
        """Remote address as 'ip:port' ('[ip]:port' for IPv6)."""
        if ':' in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    async def send_line(self, message: str) -> None:
        """
        Send a line of text to the client, terminated by line_ending.

        Args:
            message (str): Message to send.

        Raises:
            OSError: If the connection cannot be written to.
        """
        await self.send_raw(f"{message}{self.line_ending}".encode('utf-8'))

    async def send_raw(self, data: bytes) -> None:
        """
        Send raw bytes to the client.

        Args:
            data (bytes): Raw data to send.
        """
        try:
            self.writer.write(data)
            await self.writer.drain()
        except OSError as e:
            logger.error(f"Error sending raw data to {self.addr}: {e}")
            raise

    async def cleanup(self) -> None:
        """
        Close the connection. Safe to call more than once.
        """
        try:
            self.writer.close()
            await self.writer.wait_closed()
        except OSError as e:
            logger.debug(f"Error during cleanup for {self.addr}: {e}")
        logger.debug(f"Connection closed for {self.addr}")
