"""Core domain models for the hedgehog client.

These models describe what travels between the caller and the device:
the movement commands and their wire bytes, the address of the device,
and the connection state of a command session.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field

# Well-known port of the Hedgehog server
DEFAULT_PORT = 3131


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Command(enum.IntEnum):
    """Movement intents understood by the device.

    The integer value is the byte written on the wire.
    """

    FORWARD = 0
    BACKWARD = 1
    LEFT = 2
    RIGHT = 3
    STOP = 4
    FORWARD_LEFT = 5
    FORWARD_RIGHT = 6
    BACKWARD_LEFT = 7

    @property
    def wire_byte(self) -> bytes:
        return bytes([self.value])


class SessionState(str, enum.Enum):
    """Connection state of a command session."""

    DISCONNECTED = "disconnected"  # Initial and terminal
    CONNECTING = "connecting"
    CONNECTED = "connected"
    BUSY = "busy"  # A send is in flight


# ---------------------------------------------------------------------------
# Addressing
# ---------------------------------------------------------------------------


class DeviceAddress(BaseModel):
    """Destination of a command session."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(min_length=1, description="Hostname or IP address of the device")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="TCP port of the device")

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"
