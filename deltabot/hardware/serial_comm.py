"""
Thread-safe serial transport
Streams binary command frames to a motor controller on a serial port
"""

import sys
import time
import threading
import logging
import serial
import serial.tools.list_ports
from typing import List, Optional

from ..exceptions import TransportError
from .transport import CommandTransport

logger = logging.getLogger(__name__)


class SerialTransport(CommandTransport):
    """Thread-safe serial communication with the motor controller"""

    def __init__(self, port: str, baudrate: int = 115200, timeout: float = 2.0,
                 settle_time: float = 2.0, **kwargs):
        super().__init__(**kwargs)
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.settle_time = settle_time
        self._serial: Optional[serial.Serial] = None
        self._lock = threading.Lock()

    @property
    def is_connected(self) -> bool:
        """Check if serial connection is open"""
        return self._serial is not None and self._serial.is_open

    def connect(self):
        """
        Open the port

        Raises:
            TransportError: port could not be opened
        """
        with self._lock:
            if self._serial and self._serial.is_open:
                self._serial.close()

            try:
                self._serial = serial.Serial(
                    port=self.port,
                    baudrate=self.baudrate,
                    timeout=self.timeout,
                    write_timeout=self.timeout,
                    bytesize=serial.EIGHTBITS,
                    parity=serial.PARITY_NONE,
                    stopbits=serial.STOPBITS_ONE
                )
            except serial.SerialException as e:
                raise TransportError(f"Connection to {self.port} failed: {e}") from e

            # Controller resets when the port opens
            time.sleep(self.settle_time)
            self._serial.reset_input_buffer()
            self._serial.reset_output_buffer()

            logger.info(f"✅ Connected to {self.port} @ {self.baudrate} baud")

    def close(self):
        """Close serial connection"""
        with self._lock:
            if self._serial and self._serial.is_open:
                self._serial.close()
                logger.info("🔌 Serial connection closed")
            self._serial = None

    def _deliver(self, frame: bytes):
        if not self.is_connected:
            raise TransportError("Not connected")

        with self._lock:
            try:
                self._serial.write(frame)
                self._serial.flush()
            except serial.SerialTimeoutException as e:
                raise TransportError("Serial write timeout") from e
            except serial.SerialException as e:
                raise TransportError(f"Serial write failed: {e}") from e


def list_available_ports() -> List[dict]:
    """
    List all available serial ports with details
    Returns list of dicts with device, description, and hwid
    """
    ports = []

    for port in serial.tools.list_ports.comports():
        device = port.device
        is_usb = 'usb' in device.lower() or 'USB' in (port.hwid or '')
        if sys.platform.startswith("linux"):
            is_usb = is_usb or 'ttyACM' in device

        ports.append({
            'device': device,
            'description': port.description,
            'hwid': port.hwid,
            'is_usb': is_usb
        })

    return ports
