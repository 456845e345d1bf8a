"""
Binary frame builder for the motor driver
Every field is a little-endian signed 32-bit integer
"""

import struct
from typing import Iterable, List, Sequence

from ..motion.planner import MotorCommand

INT32 = struct.Struct('<i')
BASIC_RECORD = struct.Struct('<iii')       # motor, pulses, direction
EXTENDED_RECORD = struct.Struct('<iiiii')  # pulses, freq, accel, decel, direction

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1


def _check_int32(*values: int):
    for value in values:
        if not INT32_MIN <= value <= INT32_MAX:
            raise ValueError(f"{value} does not fit in a 32-bit frame field")


class FrameBuilder:
    """Build motor driver frames with validation"""

    @staticmethod
    def basic(commands: Iterable[MotorCommand]) -> bytes:
        """
        Build basic frame
        One (motor_index, pulse_count, direction) record per command,
        no header
        """
        frame = bytearray()
        for cmd in commands:
            _check_int32(cmd.motor_index, cmd.pulse_count, cmd.direction)
            frame += BASIC_RECORD.pack(cmd.motor_index, cmd.pulse_count, cmd.direction)
        return bytes(frame)

    @staticmethod
    def extended(commands: Sequence[MotorCommand],
                 target_freq: int = 400,
                 accel_pulses: int = 100,
                 decel_pulses: int = 100) -> bytes:
        """
        Build extended frame with a motion profile
        Header: motor count. Records are written in motor order.
        Ramps are capped at half the move so short moves stay valid.
        """
        commands = sorted(commands, key=lambda c: c.motor_index)
        frame = bytearray(INT32.pack(len(commands)))

        for cmd in commands:
            half = cmd.pulse_count // 2
            accel = max(0, min(accel_pulses, half))
            decel = max(0, min(decel_pulses, half))
            _check_int32(cmd.pulse_count, target_freq, accel, decel, cmd.direction)
            frame += EXTENDED_RECORD.pack(
                cmd.pulse_count, int(target_freq), accel, decel, cmd.direction
            )

        return bytes(frame)

    @staticmethod
    def decode_basic(frame: bytes) -> List[MotorCommand]:
        """Parse a basic frame back into commands"""
        if len(frame) % BASIC_RECORD.size:
            raise ValueError(
                f"Frame length {len(frame)} is not a multiple of {BASIC_RECORD.size}"
            )
        return [
            MotorCommand(motor, pulses, direction)
            for motor, pulses, direction in BASIC_RECORD.iter_unpack(frame)
        ]
