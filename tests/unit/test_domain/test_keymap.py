"""Tests for the key bindings and command names."""

from __future__ import annotations

import pytest

from hedgehog.domain.models import Command
from hedgehog.keymap import (
    FRIENDLY_NAMES,
    KEY_BINDINGS,
    command_from_name,
    friendly_status,
    key_to_command,
)


class TestKeyToCommand:
    def test_wasd(self) -> None:
        assert key_to_command("w") is Command.FORWARD
        assert key_to_command("a") is Command.LEFT
        assert key_to_command("s") is Command.BACKWARD
        assert key_to_command("d") is Command.RIGHT

    def test_case_insensitive(self) -> None:
        assert key_to_command("W") is Command.FORWARD
        assert key_to_command("Up") is Command.FORWARD

    def test_space_stops(self) -> None:
        assert key_to_command(" ") is Command.STOP
        assert key_to_command("space") is Command.STOP

    def test_unknown_key(self) -> None:
        with pytest.raises(ValueError, match="No command bound"):
            key_to_command("p")

    def test_every_binding_targets_a_command(self) -> None:
        assert set(KEY_BINDINGS.values()) == set(Command)


class TestCommandFromName:
    def test_names(self) -> None:
        assert command_from_name("forward") is Command.FORWARD
        assert command_from_name("forward-left") is Command.FORWARD_LEFT
        assert command_from_name("BACKWARD_LEFT") is Command.BACKWARD_LEFT

    def test_unknown_name(self) -> None:
        with pytest.raises(ValueError, match="Unknown command"):
            command_from_name("warp")


class TestFriendlyStatus:
    def test_labels(self) -> None:
        assert friendly_status(Command.FORWARD_RIGHT) == "Forward Right"
        assert set(FRIENDLY_NAMES) == set(Command)
