"""Shared test fixtures for the hedgehog test suite.

Provides a local fake device (an asyncio TCP server that records every
byte it receives), a recording session observer, and a port nothing
listens on.
"""

from __future__ import annotations

import asyncio
import socket

import pytest
import pytest_asyncio

from hedgehog.domain.models import DeviceAddress
from hedgehog.session.base import SessionObserver


# ---------------------------------------------------------------------------
# Fake device
# ---------------------------------------------------------------------------


class FakeDevice:
    """Accepts client connections and records the bytes they send."""

    def __init__(self) -> None:
        self.received = bytearray()
        self.client_connected = asyncio.Event()
        self.client_closed = asyncio.Event()
        self._writers: list[asyncio.StreamWriter] = []
        self._server: asyncio.Server | None = None

    @property
    def address(self) -> DeviceAddress:
        assert self._server is not None
        port = self._server.sockets[0].getsockname()[1]
        return DeviceAddress(host="127.0.0.1", port=port)

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)

    async def stop(self) -> None:
        await self.close_clients()
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self._writers.append(writer)
        self.client_connected.set()
        try:
            while True:
                data = await reader.read(1024)
                if not data:
                    break
                self.received.extend(data)
        except ConnectionError:
            pass
        finally:
            self.client_closed.set()
            writer.close()

    async def send_to_clients(self, data: bytes) -> None:
        for writer in self._writers:
            writer.write(data)
            await writer.drain()

    async def close_clients(self) -> None:
        for writer in self._writers:
            writer.close()
        self._writers.clear()

    async def wait_for_bytes(self, count: int, timeout: float = 2.0) -> bytes:
        async def _poll() -> None:
            while len(self.received) < count:
                await asyncio.sleep(0.005)

        await asyncio.wait_for(_poll(), timeout)
        return bytes(self.received)


@pytest_asyncio.fixture
async def device() -> FakeDevice:
    """A running fake device on an ephemeral localhost port."""
    fake = FakeDevice()
    await fake.start()
    yield fake
    await fake.stop()


@pytest.fixture
def unused_address() -> DeviceAddress:
    """An address on localhost that refuses connections."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return DeviceAddress(host="127.0.0.1", port=port)


# ---------------------------------------------------------------------------
# Observer
# ---------------------------------------------------------------------------


class RecordingObserver(SessionObserver):
    """Records every notification a session delivers."""

    def __init__(self) -> None:
        self.connected: list[DeviceAddress] = []
        self.failures: list[Exception] = []
        self.disconnects: list[tuple] = []
        self.disconnected = asyncio.Event()

    def on_connected(self, address):
        self.connected.append(address)

    def on_connect_failed(self, error):
        self.failures.append(error)

    def on_disconnected(self, by_user, reason, error=None):
        self.disconnects.append((by_user, reason, error))
        self.disconnected.set()


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()
