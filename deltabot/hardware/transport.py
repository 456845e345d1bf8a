"""
Command transports
Deliver an encoded command batch to the motor controller
"""

import os
import shlex
import logging
import subprocess
import tempfile
from typing import Callable, List, Sequence

from ..config import TransportConfig
from ..exceptions import TransportError
from ..motion.planner import MotorCommand
from .frames import FrameBuilder

logger = logging.getLogger(__name__)


class CommandTransport:
    """Encode a batch and hand it to the controller"""

    def __init__(self, frame_format: str = "basic",
                 target_freq: int = 400,
                 accel_pulses: int = 100,
                 decel_pulses: int = 100):
        self.frame_format = frame_format
        self.target_freq = target_freq
        self.accel_pulses = accel_pulses
        self.decel_pulses = decel_pulses
        self.sent_count = 0

    def encode(self, commands: Sequence[MotorCommand]) -> bytes:
        if self.frame_format == "extended":
            return FrameBuilder.extended(
                commands, self.target_freq, self.accel_pulses, self.decel_pulses
            )
        return FrameBuilder.basic(commands)

    def send(self, commands: Sequence[MotorCommand]):
        """
        Deliver one batch

        Raises:
            TransportError: the controller did not get the frame
        """
        frame = self.encode(commands)
        self._deliver(frame)
        self.sent_count += 1
        logger.debug(f"Frame #{self.sent_count} sent ({len(frame)} bytes)")

    def _deliver(self, frame: bytes):
        raise NotImplementedError

    def close(self):
        """Release resources (nothing to do by default)"""


class FileTransport(CommandTransport):
    """Write frames to a device node or a plain file"""

    def __init__(self, path: str, **kwargs):
        super().__init__(**kwargs)
        self.path = path

    def _deliver(self, frame: bytes):
        try:
            with open(self.path, 'wb') as f:
                f.write(frame)
        except OSError as e:
            raise TransportError(f"Could not write {self.path}: {e}") from e


class RemoteDeviceTransport(CommandTransport):
    """
    Copy the frame to the controller host with scp, then
    cat it into the driver's device node over ssh
    """

    def __init__(self, host: str,
                 remote_path: str = "/tmp/delta_command.bin",
                 remote_device: str = "/dev/delta_robot",
                 runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
                 **kwargs):
        super().__init__(**kwargs)
        self.host = host
        self.remote_path = remote_path
        self.remote_device = remote_device
        self._run = runner

    def _command(self, args: List[str]):
        try:
            result = self._run(args, capture_output=True, text=True)
        except OSError as e:
            raise TransportError(f"Could not run {args[0]}: {e}") from e

        if result.returncode != 0:
            raise TransportError(
                f"{args[0]} failed ({result.returncode}): {result.stderr.strip()}"
            )

    def _deliver(self, frame: bytes):
        fd, local_path = tempfile.mkstemp(prefix="delta_command_", suffix=".bin")
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(frame)

            self._command(["scp", local_path, f"{self.host}:{self.remote_path}"])
            self._command([
                "ssh", self.host,
                f"cat {shlex.quote(self.remote_path)} > {shlex.quote(self.remote_device)}"
            ])
            logger.info(f"✅ Command sent to {self.host}")
        finally:
            os.remove(local_path)


def create_transport(config: TransportConfig) -> CommandTransport:
    """Build the transport named in the config"""
    profile = {
        "frame_format": config.frame_format,
        "target_freq": config.target_freq,
        "accel_pulses": config.accel_pulses,
        "decel_pulses": config.decel_pulses,
    }

    if config.kind == "remote":
        return RemoteDeviceTransport(
            config.host, config.remote_path, config.remote_device, **profile
        )
    if config.kind == "serial":
        # serial_comm subclasses CommandTransport from this module
        from .serial_comm import SerialTransport
        transport = SerialTransport(
            config.port, config.baudrate, config.timeout, **profile
        )
        transport.connect()
        return transport

    return FileTransport(config.device_path, **profile)
