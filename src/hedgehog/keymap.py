"""Keyboard key names mapped to Hedgehog movement commands.

Bindings follow the usual WASD layout with arrow-key aliases:

    q  w  e        FORWARD_LEFT  FORWARD  FORWARD_RIGHT
    a  s  d        LEFT          BACKWARD RIGHT
    z              BACKWARD_LEFT

Space and ``x`` stop the device.
"""

from __future__ import annotations

from hedgehog.domain.models import Command

# ---------------------------------------------------------------------------
# Key name -> command
# ---------------------------------------------------------------------------

KEY_BINDINGS: dict[str, Command] = {
    # WASD
    "w": Command.FORWARD,
    "s": Command.BACKWARD,
    "a": Command.LEFT,
    "d": Command.RIGHT,
    # Diagonals
    "q": Command.FORWARD_LEFT,
    "e": Command.FORWARD_RIGHT,
    "z": Command.BACKWARD_LEFT,
    # Arrow keys
    "up": Command.FORWARD,
    "down": Command.BACKWARD,
    "left": Command.LEFT,
    "right": Command.RIGHT,
    # Stop
    "space": Command.STOP,
    " ": Command.STOP,
    "x": Command.STOP,
}

FRIENDLY_NAMES: dict[Command, str] = {
    Command.FORWARD: "Forward",
    Command.BACKWARD: "Backward",
    Command.LEFT: "Left",
    Command.RIGHT: "Right",
    Command.STOP: "Stop",
    Command.FORWARD_LEFT: "Forward Left",
    Command.FORWARD_RIGHT: "Forward Right",
    Command.BACKWARD_LEFT: "Backward Left",
}


def key_to_command(key: str) -> Command:
    """Look up the command bound to a key name (case-insensitive).

    Raises:
        ValueError: If no command is bound to ``key``.
    """
    lookup = key if key == " " else key.strip().lower()
    try:
        return KEY_BINDINGS[lookup]
    except KeyError:
        raise ValueError(f"No command bound to key: {key!r}") from None


def command_from_name(name: str) -> Command:
    """Parse a command name such as ``forward`` or ``forward-left``.

    Raises:
        ValueError: If ``name`` is not a command name.
    """
    normalized = name.strip().upper().replace("-", "_")
    try:
        return Command[normalized]
    except KeyError:
        raise ValueError(f"Unknown command: {name!r}") from None


def friendly_status(command: Command) -> str:
    """Human-readable label for a command, for status displays."""
    return FRIENDLY_NAMES[command]
