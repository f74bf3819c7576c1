"""TCP command session for the Hedgehog device.

One session owns one TCP connection. After connecting, the client writes
exactly one byte per command and never expects anything back: any byte
received from the device, or the connection closing, means the device
ended the session.

Sends are serialized: a send waits up to ``send_timeout`` for the one in
flight to finish, and a disconnect requested by the caller waits for it
as well rather than interrupting it.

Sessions are single use. Once a session has tried to connect, a new
session is needed to talk to the device again.
"""

from __future__ import annotations

import asyncio
import logging

from hedgehog.domain.models import Command, DeviceAddress, SessionState
from hedgehog.session.base import (
    ConnectFailureError,
    LinkFailureError,
    NotConnectedError,
    PeerClosedError,
    SendTimeoutError,
    SessionError,
    SessionObserver,
    SessionSpentError,
)

logger = logging.getLogger(__name__)

# Maximum time a send waits for the previous one to finish (seconds)
SEND_TIMEOUT = 3.0
# Hand-over granularity promised to a waiting send (seconds). Waiters are
# woken by the send lock as soon as it is released, never later than this.
POLL_INTERVAL = 0.01


class CommandSession:
    """Client side of a Hedgehog remote-control connection.

    Usage::

        session = CommandSession(DeviceAddress(host="192.168.0.42"), observer=ui)
        if await session.connect():
            await session.send_command(Command.FORWARD)
            await session.send_command(Command.STOP)
            await session.disconnect(by_user=True, reason="Disconnected by User.")
    """

    def __init__(
        self,
        address: DeviceAddress,
        observer: SessionObserver | None = None,
        send_timeout: float = SEND_TIMEOUT,
        connect_timeout: float | None = None,
    ) -> None:
        self._address = address
        self._observer = observer if observer is not None else SessionObserver()
        self._send_timeout = send_timeout
        self._connect_timeout = connect_timeout
        self._state = SessionState.DISCONNECTED
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._listener: asyncio.Task[None] | None = None
        # Held for the duration of every send and every disconnect; all
        # transitions out of CONNECTED/BUSY happen under it.
        self._send_lock = asyncio.Lock()
        self._pending_command: Command | None = None
        self._used = False
        # Set when a write fails; sends queued behind it must not reuse the link
        self._link_failed = False

    @property
    def address(self) -> DeviceAddress:
        return self._address

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def pending_command(self) -> Command | None:
        """The last command accepted for sending."""
        return self._pending_command

    @property
    def is_connected(self) -> bool:
        return self._state in (SessionState.CONNECTED, SessionState.BUSY)

    @property
    def is_spent(self) -> bool:
        """True once the session has been used and can no longer connect."""
        return self._used and self._state is SessionState.DISCONNECTED

    # ------------------------------------------------------------------
    # Connect
    # ------------------------------------------------------------------

    async def connect(self) -> bool:
        """Open the connection and start listening for a peer disconnect.

        Returns:
            True when connected. On failure the observer receives a
            ConnectFailureError and False is returned.

        Raises:
            SessionSpentError: If this session has already tried to connect.
        """
        if self._used:
            raise SessionSpentError(
                "Session already used; create a new session to reconnect",
                address=str(self._address),
            )
        self._used = True
        self._state = SessionState.CONNECTING
        logger.info("Connecting to Hedgehog at %s...", self._address)

        try:
            opening = asyncio.open_connection(self._address.host, self._address.port)
            if self._connect_timeout is None:
                reader, writer = await opening
            else:
                reader, writer = await asyncio.wait_for(opening, self._connect_timeout)
        except (OSError, ValueError, asyncio.TimeoutError) as e:
            self._state = SessionState.DISCONNECTED
            detail = str(e) or type(e).__name__
            error = ConnectFailureError(
                f"Could not connect to {self._address}: {detail}",
                address=str(self._address),
            )
            logger.error("Error connecting: %s", error)
            self._notify("on_connect_failed", error)
            return False

        self._reader = reader
        self._writer = writer
        self._state = SessionState.CONNECTED
        self._listener = asyncio.create_task(
            self._listen(reader), name=f"hedgehog-listener-{self._address}"
        )
        logger.info("Connected to %s", self._address)
        self._notify("on_connected", self._address)
        return True

    # ------------------------------------------------------------------
    # Send
    # ------------------------------------------------------------------

    async def send_command(self, command: Command | int) -> bool:
        """Write one command byte to the device.

        Waits for any send already in flight. Each call resolves on its own;
        overlapping calls from different input sources never share a result.

        Args:
            command: A Command or its integer wire code.

        Returns:
            True when the byte was written. False when the write failed; in
            that case the session has been disconnected and the observer
            notified with a LinkFailureError.

        Raises:
            ValueError: If ``command`` is not a known command code.
            SendTimeoutError: If the previous send did not finish within
                              ``send_timeout``. The session stays connected.
            NotConnectedError: If the session is not connected, or an earlier
                               write failed and the session is closing.
                               Nothing is written.
        """
        command = Command(command)
        try:
            await asyncio.wait_for(self._send_lock.acquire(), timeout=self._send_timeout)
        except asyncio.TimeoutError:
            logger.error(
                "Could not send %s, Hedgehog send request timed out after %.0f ms",
                command.name, self._send_timeout * 1000,
            )
            raise SendTimeoutError(
                "Hedgehog send request timed out", address=str(self._address)
            ) from None

        failure: LinkFailureError | None = None
        try:
            if self._state is not SessionState.CONNECTED or self._link_failed:
                raise NotConnectedError(
                    "Not connected to Hedgehog", address=str(self._address)
                )
            self._state = SessionState.BUSY
            self._pending_command = command
            try:
                await self._write(command.wire_byte)
            except LinkFailureError as e:
                failure = e
                self._link_failed = True
            finally:
                self._state = SessionState.CONNECTED
        finally:
            self._send_lock.release()

        if failure is not None:
            logger.error("Send of %s failed: %s", command.name, failure)
            await self._disconnect(False, str(failure), failure)
            return False

        logger.debug("Sent %s (0x%02X)", command.name, command.value)
        return True

    async def _write(self, payload: bytes) -> None:
        """Write ``payload`` and wait until the transport has taken all of it."""
        writer = self._writer
        if writer is None or writer.is_closing():
            raise LinkFailureError(
                "Tried to send message to Hedgehog, connection is closed",
                address=str(self._address),
            )
        try:
            writer.write(payload)
            await writer.drain()
        except OSError as e:
            raise LinkFailureError(
                f"Tried to send message to Hedgehog, failed: {e}",
                address=str(self._address),
            ) from e

    # ------------------------------------------------------------------
    # Disconnect
    # ------------------------------------------------------------------

    async def disconnect(self, by_user: bool = True, reason: str | None = None) -> None:
        """Close the connection once no send is in flight.

        Does nothing unless the session is connected, so it is safe to call
        repeatedly. The observer is notified exactly once per session.
        """
        await self._disconnect(by_user, reason, None)

    async def _disconnect(
        self, by_user: bool, reason: str | None, error: SessionError | None
    ) -> None:
        async with self._send_lock:
            if self._state is not SessionState.CONNECTED:
                logger.debug("Disconnect ignored, session is %s", self._state.value)
                return
            self._state = SessionState.DISCONNECTED

            listener, self._listener = self._listener, None
            if listener is not None and listener is not asyncio.current_task():
                listener.cancel()

            writer, self._writer = self._writer, None
            self._reader = None
            if writer is not None:
                writer.close()
                try:
                    await writer.wait_closed()
                except OSError as e:
                    logger.debug("Error while closing connection: %s", e)

        if by_user:
            logger.info("Disconnected from %s: %s", self._address, reason or "by user")
        else:
            logger.warning("Connection to %s lost: %s", self._address, reason)
        self._notify("on_disconnected", by_user, reason, error)

    # ------------------------------------------------------------------
    # Listener
    # ------------------------------------------------------------------

    async def _listen(self, reader: asyncio.StreamReader) -> None:
        """Wait for a single byte or close from the device.

        The device never sends anything during a healthy session, so any
        outcome of this read ends the session.
        """
        try:
            data = await reader.read(1)
        except OSError as e:
            reason = f"Connection reset by Hedgehog: {e}"
        else:
            reason = "Hedgehog sent unexpected data" if data else "Server shut down connection!"

        error = PeerClosedError(reason, address=str(self._address))
        await self._disconnect(False, reason, error)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _notify(self, callback: str, *args: object) -> None:
        try:
            getattr(self._observer, callback)(*args)
        except Exception:
            logger.exception("Session observer %s() raised", callback)

    async def __aenter__(self) -> CommandSession:
        """Async context manager entry -- connects to the device."""
        if not await self.connect():
            raise ConnectFailureError(
                f"Could not connect to {self._address}", address=str(self._address)
            )
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        """Async context manager exit -- disconnects from the device."""
        await self.disconnect(by_user=True, reason="Session closed")
