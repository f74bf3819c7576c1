"""Observer interface and error types for command sessions.

A session reports its lifecycle to exactly one observer. The observer is
the caller's rendering hook (status label, log box, error dialog); the
session itself never prints or prompts.
"""

from __future__ import annotations

from hedgehog.domain.models import DeviceAddress


class SessionObserver:
    """Receives connection-state notifications from a CommandSession.

    All methods are no-ops by default; subclasses override the ones they
    render. Callbacks run on the event loop and must not block.

    Example usage::

        class StatusLabel(SessionObserver):
            def on_connected(self, address):
                print(f"Connected to {address}")

        session = CommandSession(address, observer=StatusLabel())
    """

    def on_connected(self, address: DeviceAddress) -> None:
        """The connection to ``address`` has been established."""

    def on_connect_failed(self, error: ConnectFailureError) -> None:
        """The connection attempt failed. The session is spent."""

    def on_disconnected(
        self,
        by_user: bool,
        reason: str | None,
        error: SessionError | None = None,
    ) -> None:
        """The connection has been closed.

        Args:
            by_user: True when the caller requested the disconnect, so an
                     error dialog can be suppressed.
            reason: Human-readable reason, as supplied by the caller or
                    produced by the failure.
            error: The LinkFailureError or PeerClosedError that forced the
                   disconnect, None for caller-initiated disconnects.
        """


class SessionError(Exception):
    """Base class for command session failures."""

    def __init__(self, message: str, address: str = "") -> None:
        super().__init__(message)
        self.address = address


class ConnectFailureError(SessionError):
    """The transport could not establish the connection."""


class SendTimeoutError(SessionError):
    """Another send held the session past the send timeout."""


class NotConnectedError(SessionError):
    """A send was attempted while the session was not connected."""


class LinkFailureError(SessionError):
    """A write did not complete; the connection is considered dead."""


class PeerClosedError(SessionError):
    """The device closed the connection or sent unexpected data."""


class SessionSpentError(SessionError):
    """connect() was called on a session that has already been used."""
