"""Tests for the hedgehog command-line interface."""

from __future__ import annotations

import argparse
import io
import logging

import pytest

from hedgehog.cli import ConsoleObserver, _drive, _send, main, parse_args
from hedgehog.config.settings import Settings
from hedgehog.domain.models import DeviceAddress


def make_args(address: DeviceAddress, **kwargs) -> argparse.Namespace:
    return argparse.Namespace(host=address.host, port=address.port, **kwargs)


class TestParseArgs:
    def test_send(self) -> None:
        args = parse_args(["send", "192.168.0.42", "forward", "stop", "--interval", "0.5"])
        assert args.command == "send"
        assert args.host == "192.168.0.42"
        assert args.commands == ["forward", "stop"]
        assert args.interval == 0.5
        assert args.port is None

    def test_drive_with_port(self) -> None:
        args = parse_args(["-v", "drive", "192.168.0.42", "--port", "4000"])
        assert args.command == "drive"
        assert args.port == 4000
        assert args.verbose is True

    def test_no_command(self) -> None:
        assert parse_args([]).command is None


class TestConsoleObserver:
    def test_connected(self) -> None:
        out = io.StringIO()
        observer = ConsoleObserver(stream=out)
        observer.on_connected(DeviceAddress(host="10.0.0.2"))
        assert observer.status == "Connected"
        assert "Connected to 10.0.0.2:3131" in out.getvalue()

    def test_lost_connection_is_reported(self) -> None:
        out = io.StringIO()
        observer = ConsoleObserver(stream=out)
        observer.on_disconnected(False, "Server shut down connection!")
        assert "connection to the Hedgehog has been lost" in out.getvalue()
        assert "Server shut down connection!" in out.getvalue()

    def test_user_disconnect_is_quiet(self) -> None:
        out = io.StringIO()
        observer = ConsoleObserver(stream=out)
        observer.on_disconnected(True, "Disconnected by User.")
        assert observer.status == "Disconnected"
        assert "lost" not in out.getvalue()


class TestSendCommand:
    @pytest.mark.asyncio
    async def test_sends_in_order(self, device, capsys) -> None:
        args = make_args(device.address, commands=["forward", "forward-right", "stop"], interval=0.0)
        assert await _send(Settings(), args) == 0
        assert await device.wait_for_bytes(3) == b"\x00\x06\x04"
        assert "Sent: Forward Right" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_unknown_command(self, device) -> None:
        args = make_args(device.address, commands=["warp"], interval=0.0)
        assert await _send(Settings(), args) == 2
        assert not device.client_connected.is_set()

    @pytest.mark.asyncio
    async def test_unreachable(self, unused_address, capsys) -> None:
        args = make_args(unused_address, commands=["stop"], interval=0.0)
        assert await _send(Settings(), args) == 1
        assert "Could not Connect!" in capsys.readouterr().out


class TestDrive:
    @pytest.mark.asyncio
    async def test_keys_drive_and_release(self, device, capsys) -> None:
        stdin = io.StringIO("w\n\nd\na\nbogus\nquit\n")
        assert await _drive(Settings(), make_args(device.address), stdin=stdin) == 0
        await device.client_closed.wait()
        # w: STOP FORWARD | empty: STOP | d: STOP RIGHT | a: release STOP, STOP LEFT
        # bogus: release STOP, then rejected
        assert bytes(device.received) == b"\x04\x00\x04\x04\x03\x04\x04\x02\x04"
        out = capsys.readouterr().out
        assert "Key: Forward" in out
        assert "Wrong input" in out

    @pytest.mark.asyncio
    async def test_end_of_input_disconnects(self, device) -> None:
        assert await _drive(Settings(), make_args(device.address), stdin=io.StringIO("")) == 0
        await device.client_closed.wait()
        assert device.received == b""


class TestMain:
    def teardown_method(self) -> None:
        logger = logging.getLogger("hedgehog")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    def test_rejects_unknown_command_name(self, tmp_path) -> None:
        config = tmp_path / "missing.yaml"
        assert main(["-c", str(config), "send", "127.0.0.1", "warp"]) == 2

    def test_help_without_command(self) -> None:
        with pytest.raises(SystemExit):
            main([])
