"""Hardware communication module"""

from .frames import FrameBuilder
from .transport import (CommandTransport, FileTransport,
                        RemoteDeviceTransport, create_transport)
from .serial_comm import SerialTransport, list_available_ports

__all__ = [
    'FrameBuilder',
    'CommandTransport',
    'FileTransport',
    'RemoteDeviceTransport',
    'SerialTransport',
    'create_transport',
    'list_available_ports'
]
