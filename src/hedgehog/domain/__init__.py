"""Domain models for hedgehog.

Commands, device addresses and session states shared by the session,
the driver and the command-line caller.
"""

from hedgehog.domain.models import DEFAULT_PORT, Command, DeviceAddress, SessionState

__all__ = [
    "DEFAULT_PORT",
    "Command",
    "DeviceAddress",
    "SessionState",
]
