"""Command-line interface for the hedgehog client.

Provides the console entry point: one-shot command sending and an
interactive driving mode that reads keys from stdin.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TextIO

from hedgehog.domain.models import Command, DeviceAddress
from hedgehog.session.base import (
    ConnectFailureError,
    NotConnectedError,
    SessionError,
    SessionObserver,
)

logger = logging.getLogger(__name__)

DRIVE_HELP = """\
Keys: w/a/s/d or up/down/left/right, q/e/z diagonals, x or space to stop.
Enter a key to drive, an empty line to release, 'quit' to disconnect."""


class ConsoleObserver(SessionObserver):
    """Prints session status changes to the terminal."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self.status = "Disconnected"

    def _print(self, text: str) -> None:
        print(text, file=self._stream)

    def on_connected(self, address: DeviceAddress) -> None:
        self.status = "Connected"
        self._print(f"Status: Connected to {address}")

    def on_connect_failed(self, error: ConnectFailureError) -> None:
        self.status = "Disconnected"
        self._print(f"Could not Connect!\n{error}")

    def on_disconnected(self, by_user: bool, reason: str | None, error: SessionError | None = None) -> None:
        self.status = "Disconnected"
        self._print("Status: Disconnected")
        if not by_user:
            text = "The connection to the Hedgehog has been lost!"
            if reason:
                text += f"\n{reason}"
            self._print(text)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="hedgehog",
        description="Remote-control client for the Hedgehog rover",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/hedgehog.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    send_parser = subparsers.add_parser("send", help="Send commands and disconnect")
    send_parser.add_argument("host", help="Hedgehog hostname or IP address")
    send_parser.add_argument(
        "commands", nargs="+", metavar="COMMAND",
        help="Commands to send in order: "
        + ", ".join(c.name.lower().replace("_", "-") for c in Command),
    )
    send_parser.add_argument(
        "--interval", type=float, default=0.0,
        help="Seconds to wait between commands",
    )
    send_parser.add_argument("--port", type=int, default=None, help="Override the device port")

    drive_parser = subparsers.add_parser("drive", help="Drive interactively from the keyboard")
    drive_parser.add_argument("host", help="Hedgehog hostname or IP address")
    drive_parser.add_argument("--port", type=int, default=None, help="Override the device port")

    return parser.parse_args(argv)


def _build_session(settings, args, observer: SessionObserver):
    from hedgehog.session.tcp import CommandSession

    conn = settings.connection
    return CommandSession(
        conn.address(args.host, args.port),
        observer=observer,
        send_timeout=conn.send_timeout,
        connect_timeout=conn.connect_timeout,
    )


async def _send(settings, args) -> int:
    """Connect, send each command in order, then disconnect."""
    from hedgehog.keymap import command_from_name, friendly_status

    try:
        commands = [command_from_name(name) for name in args.commands]
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    session = _build_session(settings, args, ConsoleObserver())
    if not await session.connect():
        return 1

    try:
        for i, command in enumerate(commands):
            if i and args.interval > 0:
                await asyncio.sleep(args.interval)
            if not await session.send_command(command):
                return 1
            print(f"Sent: {friendly_status(command)}")
    except SessionError as e:
        print(f"ERROR: Could not send message: {e}", file=sys.stderr)
        return 1
    finally:
        await session.disconnect(by_user=True, reason="Disconnected by User.")
    return 0


async def _drive(settings, args, stdin: TextIO | None = None) -> int:
    """Drive the device from keys typed on stdin, one key per line."""
    from hedgehog.driver import Driver

    stdin = stdin if stdin is not None else sys.stdin
    session = _build_session(settings, args, ConsoleObserver())
    if not await session.connect():
        return 1

    driver = Driver(session)
    loop = asyncio.get_running_loop()
    print(DRIVE_HELP)
    try:
        while session.is_connected:
            line = await loop.run_in_executor(None, stdin.readline)
            if not line or line.strip().lower() in ("quit", "exit"):
                break
            key = line.rstrip("\r\n")
            try:
                if driver.held is not Command.STOP or not key:
                    await driver.release()
                if not key:
                    print("Key: /")
                    continue
                label = await driver.press(key)
                print(f"Key: {label or '/'}")
            except ValueError as e:
                print(f"Wrong input: {e}")
            except NotConnectedError:
                break
            except SessionError as e:
                print(f"ERROR: {e}", file=sys.stderr)
    finally:
        await session.disconnect(by_user=True, reason="Disconnected by User.")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the hedgehog CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return 0

    from hedgehog.config.settings import load_settings
    from hedgehog.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "send":
        logger.debug("Sending %d command(s) to %s", len(args.commands), args.host)
        return asyncio.run(_send(settings, args))

    elif args.command == "drive":
        logger.debug("Starting interactive drive for %s", args.host)
        return asyncio.run(_drive(settings, args))

    return 0


if __name__ == "__main__":
    sys.exit(main())
