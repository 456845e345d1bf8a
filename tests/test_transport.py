"""Tests for command transports"""

import os
import subprocess
from unittest import mock

import pytest
import serial

from deltabot.config import TransportConfig
from deltabot.exceptions import TransportError
from deltabot.hardware import (FileTransport, FrameBuilder,
                               RemoteDeviceTransport, SerialTransport,
                               create_transport)
from deltabot.motion import MotorCommand

COMMANDS = [MotorCommand(0, 4520, 1), MotorCommand(1, 4520, 1),
            MotorCommand(2, 4520, 1)]


class FakeRunner:
    """Stands in for subprocess.run"""

    def __init__(self, returncode=0, stderr=""):
        self.returncode = returncode
        self.stderr = stderr
        self.calls = []
        self.copied = None

    def __call__(self, args, **kwargs):
        self.calls.append(args)
        if args[0] == "scp":
            with open(args[1], 'rb') as f:
                self.copied = f.read()
        return subprocess.CompletedProcess(args, self.returncode, "", self.stderr)


class TestFileTransport:

    def test_writes_frame(self, tmp_path):
        path = tmp_path / "delta_command.bin"
        transport = FileTransport(str(path))
        transport.send(COMMANDS)

        assert path.read_bytes() == FrameBuilder.basic(COMMANDS)
        assert transport.sent_count == 1

    def test_extended_format(self, tmp_path):
        path = tmp_path / "delta_command.bin"
        FileTransport(str(path), frame_format="extended").send(COMMANDS)
        assert path.read_bytes() == FrameBuilder.extended(COMMANDS)

    def test_missing_directory(self, tmp_path):
        transport = FileTransport(str(tmp_path / "missing" / "cmd.bin"))
        with pytest.raises(TransportError):
            transport.send(COMMANDS)
        assert transport.sent_count == 0


class TestRemoteDeviceTransport:

    def test_copies_then_cats(self):
        runner = FakeRunner()
        transport = RemoteDeviceTransport("pi.local", runner=runner)
        transport.send(COMMANDS)

        scp, ssh = runner.calls
        assert scp[0] == "scp"
        assert scp[2] == "pi.local:/tmp/delta_command.bin"
        assert ssh == ["ssh", "pi.local",
                       "cat /tmp/delta_command.bin > /dev/delta_robot"]
        assert runner.copied == FrameBuilder.basic(COMMANDS)
        # Local temp file is cleaned up
        assert not os.path.exists(scp[1])

    def test_remote_paths_are_quoted(self):
        runner = FakeRunner()
        transport = RemoteDeviceTransport("pi.local", remote_path="/tmp/delta cmd.bin",
                                          remote_device="/dev/delta;reboot",
                                          runner=runner)
        transport.send(COMMANDS)

        assert runner.calls[1][2] == "cat '/tmp/delta cmd.bin' > '/dev/delta;reboot'"

    def test_failure(self):
        runner = FakeRunner(returncode=1, stderr="Connection refused")
        transport = RemoteDeviceTransport("pi.local", runner=runner)

        with pytest.raises(TransportError, match="Connection refused"):
            transport.send(COMMANDS)
        assert len(runner.calls) == 1
        assert not os.path.exists(runner.calls[0][1])


class TestSerialTransport:

    def test_send(self):
        with mock.patch("deltabot.hardware.serial_comm.serial.Serial") as serial_cls:
            port = serial_cls.return_value
            port.is_open = True

            transport = SerialTransport("/dev/ttyUSB0", settle_time=0)
            transport.connect()
            transport.send(COMMANDS)

        port.write.assert_called_once_with(FrameBuilder.basic(COMMANDS))
        port.reset_input_buffer.assert_called_once()

    def test_not_connected(self):
        with pytest.raises(TransportError):
            SerialTransport("/dev/ttyUSB0").send(COMMANDS)

    def test_connect_failure(self):
        with mock.patch("deltabot.hardware.serial_comm.serial.Serial",
                        side_effect=serial.SerialException("no such port")):
            with pytest.raises(TransportError):
                SerialTransport("/dev/ttyUSB9", settle_time=0).connect()


class TestCreateTransport:

    def test_file(self, tmp_path):
        path = str(tmp_path / "cmd.bin")
        transport = create_transport(TransportConfig(kind="file", device_path=path))
        assert isinstance(transport, FileTransport)
        assert transport.path == path

    def test_remote(self):
        transport = create_transport(TransportConfig(kind="remote", host="pi.local",
                                                     frame_format="extended"))
        assert isinstance(transport, RemoteDeviceTransport)
        assert transport.host == "pi.local"
        assert transport.frame_format == "extended"
