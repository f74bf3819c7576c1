"""Key-press driving on top of a command session.

A pressed key drives the device until it is released. While a movement
is held, further presses are ignored, so key-repeat events do not flood
the device. Every movement is preceded by a STOP so the device never
blends two movements.
"""

from __future__ import annotations

import logging

from hedgehog.domain.models import Command
from hedgehog.keymap import friendly_status, key_to_command
from hedgehog.session.base import SessionError
from hedgehog.session.tcp import CommandSession

logger = logging.getLogger(__name__)


class Driver:
    """Translates key presses and releases into session commands."""

    def __init__(self, session: CommandSession) -> None:
        self._session = session
        self._held = Command.STOP

    @property
    def held(self) -> Command:
        """The movement currently held, STOP when idle."""
        return self._held

    async def press(self, key: str) -> str | None:
        """Start the movement bound to ``key``.

        Returns:
            The friendly label of the movement now driving, or None when the
            press was ignored or the link failed.

        Raises:
            ValueError: If no command is bound to ``key``.
            SessionError: If a send timed out or the session is not
                          connected. The held movement is reset.
        """
        if self._held is not Command.STOP:
            logger.debug("Ignoring %r, %s is held", key, self._held.name)
            return None

        command = key_to_command(key)
        self._held = command
        try:
            sent = await self._session.send_command(Command.STOP)
            if sent and command is not Command.STOP:
                sent = await self._session.send_command(command)
        except SessionError:
            self._held = Command.STOP
            raise

        if not sent:
            self._held = Command.STOP
            return None
        if command is Command.STOP:
            self._held = Command.STOP
        logger.info("Driving: %s", friendly_status(command))
        return friendly_status(command)

    async def release(self) -> None:
        """Stop the device and accept the next press."""
        self._held = Command.STOP
        await self._session.send_command(Command.STOP)
