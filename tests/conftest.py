"""Shared fixtures for deltabot tests"""

import pytest

from deltabot.config import DeltaConfig, GeometryConfig
from deltabot.exceptions import TransportError
from deltabot.hardware import CommandTransport
from deltabot.motion import (ForwardKinematics, InverseKinematics,
                             NewtonRaphsonSolver, MotionPlanner, RobotState)


class RecordingTransport(CommandTransport):
    """Keeps every frame instead of sending it"""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.frames = []
        self.batches = []
        self.closed = False

    def send(self, commands):
        self.batches.append(list(commands))
        super().send(commands)

    def _deliver(self, frame):
        self.frames.append(frame)

    def close(self):
        self.closed = True


class FailingTransport(RecordingTransport):

    def _deliver(self, frame):
        raise TransportError("cable unplugged")


@pytest.fixture
def geometry():
    """Example geometry: e=30, f=60, rf=50, re=80, z offset 11.2"""
    return GeometryConfig(
        effector_edge=30.0,
        base_edge=60.0,
        upper_arm_length=50.0,
        lower_arm_length=80.0,
        min_angle_deg=-85.0,
        max_angle_deg=28.0,
        steps_per_rev=1600,
        gear_ratio=9.0,
        z_offset=11.2
    )


@pytest.fixture
def ik(geometry):
    return InverseKinematics(geometry)


@pytest.fixture
def fk(geometry):
    return ForwardKinematics(geometry)


@pytest.fixture
def newton(geometry):
    return NewtonRaphsonSolver(geometry)


@pytest.fixture
def planner(geometry, ik):
    """Planner without calibration correction"""
    return MotionPlanner(geometry, ik)


@pytest.fixture
def retracted(geometry):
    return RobotState.retracted(geometry)


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def failing_transport():
    return FailingTransport()


@pytest.fixture
def config():
    """Default config with no settle delay"""
    cfg = DeltaConfig()
    cfg.path.home_settle_time = 0.0
    cfg.path.move_delay = 0.0
    return cfg
