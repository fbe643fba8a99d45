"""
pytest configuration and fixtures.
"""

import asyncio
from pathlib import Path
from typing import Any, AsyncIterator, Awaitable, Callable, List, Optional

import pytest
import pytest_asyncio

from line_server.server import LineServer

READ_TIMEOUT = 3.0


class LineClient:
    """Test client speaking the newline-delimited protocol."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        self.reader = reader
        self.writer = writer

    async def send(self, line: str) -> None:
        self.writer.write(f"{line}\n".encode('utf-8'))
        await self.writer.drain()

    async def send_raw(self, data: bytes) -> None:
        self.writer.write(data)
        await self.writer.drain()

    async def receive(self) -> str:
        """Read one reply line, newline included."""
        data = await asyncio.wait_for(self.reader.readline(), timeout=READ_TIMEOUT)
        return data.decode('utf-8')

    async def request(self, line: str) -> str:
        await self.send(line)
        return await self.receive()

    async def wait_closed_by_server(self, timeout: float = READ_TIMEOUT) -> bool:
        """Return True once the server has closed the connection."""
        data = await asyncio.wait_for(self.reader.read(), timeout=timeout)
        return data == b""

    async def close(self) -> None:
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except OSError:
            pass


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Directory the server writes client logs into."""
    return tmp_path / "logs"


@pytest.fixture
def client_log(log_dir: Path) -> Path:
    """Log file for clients connecting from 127.0.0.1."""
    return log_dir / "127.0.0.1.log"


@pytest_asyncio.fixture
async def start_server(log_dir: Path) -> AsyncIterator[Callable[..., Awaitable[LineServer]]]:
    """Factory starting servers on a free local port; all are shut down afterwards."""
    servers: List[LineServer] = []

    async def _start(**overrides: Any) -> LineServer:
        options = {'host': '127.0.0.1', 'port': 0, 'log_dir': str(log_dir)}
        options.update(overrides)
        server = LineServer(**options)
        await server.listen()
        servers.append(server)
        return server

    yield _start

    for server in servers:
        await server.shutdown(grace_period=0)


@pytest_asyncio.fixture
async def server(start_server) -> LineServer:
    """A running server with default settings."""
    return await start_server()


@pytest_asyncio.fixture
async def connect() -> AsyncIterator[Callable[[LineServer], Awaitable[LineClient]]]:
    """Factory opening client connections; all are closed afterwards."""
    clients: List[LineClient] = []

    async def _connect(target: LineServer, host: Optional[str] = None) -> LineClient:
        reader, writer = await asyncio.open_connection(host or '127.0.0.1', target.port)
        client = LineClient(reader, writer)
        clients.append(client)
        return client

    yield _connect

    for client in clients:
        await client.close()


@pytest_asyncio.fixture
async def client(server: LineServer, connect) -> LineClient:
    """A client connected to the default server."""
    return await connect(server)
