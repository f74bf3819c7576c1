"""Command session module for hedgehog.

Owns the TCP connection to a Hedgehog device, serializes command sends
and reports connection-state changes to a caller-supplied observer.

Public API:
    CommandSession -- Single-use TCP session to one device
    SessionObserver -- Callback interface for connection events
    SessionError -- Base class of all session failures
"""

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
from hedgehog.session.tcp import POLL_INTERVAL, SEND_TIMEOUT, CommandSession

__all__ = [
    "POLL_INTERVAL",
    "SEND_TIMEOUT",
    "CommandSession",
    "ConnectFailureError",
    "LinkFailureError",
    "NotConnectedError",
    "PeerClosedError",
    "SendTimeoutError",
    "SessionError",
    "SessionObserver",
    "SessionSpentError",
]
