"""
Runtime configuration management
Loads robot geometry, calibration samples, path and transport settings
from YAML and validates them once at startup
"""

import math
import os
import logging
import yaml
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field, asdict

from ..exceptions import ConfigurationError
from .defaults import (GEOMETRY_DEFAULTS, CALIBRATION_SAMPLES,
                       CALIBRATION_DEFAULTS, DEFAULT_WAYPOINTS, PATH_DEFAULTS,
                       TRANSPORT_DEFAULTS, MOTION_PROFILE_DEFAULTS)

logger = logging.getLogger(__name__)


class OutOfRangePolicy(Enum):
    """How a calibration query outside the measured heights is handled"""
    ZERO = "zero"       # Warn and apply no correction
    REJECT = "reject"   # Refuse the move


@dataclass(frozen=True)
class GeometryConfig:
    """Robot geometry and motion limits (lengths in mm, angles in degrees)"""

    effector_edge: float = GEOMETRY_DEFAULTS["effector_edge"]
    base_edge: float = GEOMETRY_DEFAULTS["base_edge"]
    upper_arm_length: float = GEOMETRY_DEFAULTS["upper_arm_length"]
    lower_arm_length: float = GEOMETRY_DEFAULTS["lower_arm_length"]
    min_angle_deg: float = GEOMETRY_DEFAULTS["min_angle_deg"]
    max_angle_deg: float = GEOMETRY_DEFAULTS["max_angle_deg"]
    steps_per_rev: int = GEOMETRY_DEFAULTS["steps_per_rev"]
    gear_ratio: float = GEOMETRY_DEFAULTS["gear_ratio"]
    z_offset: float = GEOMETRY_DEFAULTS["z_offset"]

    def __post_init__(self):
        for name in ("effector_edge", "base_edge", "upper_arm_length",
                     "lower_arm_length", "min_angle_deg", "max_angle_deg",
                     "steps_per_rev", "gear_ratio", "z_offset"):
            value = getattr(self, name)
            if (isinstance(value, bool) or not isinstance(value, (int, float))
                    or not math.isfinite(value)):
                raise ConfigurationError(f"{name} must be a finite number, got {value!r}")

        for name in ("effector_edge", "base_edge",
                     "upper_arm_length", "lower_arm_length"):
            value = getattr(self, name)
            if not value > 0:
                raise ConfigurationError(f"{name} must be > 0, got {value!r}")

        if not self.min_angle_deg < self.max_angle_deg:
            raise ConfigurationError(
                f"min_angle_deg ({self.min_angle_deg}) must be below "
                f"max_angle_deg ({self.max_angle_deg})"
            )
        if not self.steps_per_rev > 0:
            raise ConfigurationError("steps_per_rev must be > 0")
        if not self.gear_ratio > 0:
            raise ConfigurationError("gear_ratio must be > 0")

    @property
    def base_radius(self) -> float:
        """Circumradius of the base triangle"""
        return self.base_edge / math.sqrt(3)

    @property
    def effector_radius(self) -> float:
        """Circumradius of the effector triangle"""
        return self.effector_edge / math.sqrt(3)

    @property
    def base_joint_offset(self) -> float:
        """Distance from base centre to an arm hinge (edge midpoint)"""
        return self.base_radius / 2

    @property
    def effector_joint_offset(self) -> float:
        """Distance from effector centre to a lower-arm joint"""
        return self.effector_radius / 2

    @property
    def pulses_per_degree(self) -> float:
        """Motor pulses for one degree of joint travel"""
        return self.steps_per_rev * self.gear_ratio / 360.0


@dataclass
class CalibrationConfig:
    """Measured calibration samples and out-of-range policy"""

    samples: List[Dict[str, float]] = field(
        default_factory=lambda: [dict(s) for s in CALIBRATION_SAMPLES])
    out_of_range: str = CALIBRATION_DEFAULTS["out_of_range"]

    def __post_init__(self):
        try:
            OutOfRangePolicy(self.out_of_range)
        except ValueError:
            raise ConfigurationError(
                f"calibration.out_of_range must be 'zero' or 'reject', "
                f"got {self.out_of_range!r}"
            ) from None

        for sample in self.samples:
            if not isinstance(sample, dict) or set(sample) != {"z", "angle"}:
                raise ConfigurationError(
                    f"Calibration sample needs exactly 'z' and 'angle': {sample!r}"
                )
            try:
                values = [float(v) for v in sample.values()]
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f"Calibration sample values must be numbers: {sample!r}"
                ) from None
            if not all(math.isfinite(v) for v in values):
                raise ConfigurationError(
                    f"Calibration sample values must be finite: {sample!r}"
                )

    @property
    def policy(self) -> OutOfRangePolicy:
        return OutOfRangePolicy(self.out_of_range)


@dataclass
class PathConfig:
    """Waypoint list and timing for the path driver"""

    waypoints: List[Tuple[float, float, float]] = field(
        default_factory=lambda: list(DEFAULT_WAYPOINTS))
    move_delay: float = PATH_DEFAULTS["move_delay"]
    home_settle_time: float = PATH_DEFAULTS["home_settle_time"]

    def __post_init__(self):
        # YAML gives lists, keep tuples internally
        self.waypoints = [tuple(float(v) for v in point) for point in self.waypoints]
        for point in self.waypoints:
            if len(point) != 3:
                raise ConfigurationError(f"Waypoint needs x, y, z: {point!r}")
        if self.move_delay < 0 or self.home_settle_time < 0:
            raise ConfigurationError("Delays must not be negative")


@dataclass
class TransportConfig:
    """Where and how motor command frames are delivered"""

    kind: str = TRANSPORT_DEFAULTS["kind"]
    frame_format: str = TRANSPORT_DEFAULTS["frame_format"]
    device_path: str = TRANSPORT_DEFAULTS["device_path"]
    host: str = TRANSPORT_DEFAULTS["host"]
    remote_path: str = TRANSPORT_DEFAULTS["remote_path"]
    remote_device: str = TRANSPORT_DEFAULTS["remote_device"]
    port: str = TRANSPORT_DEFAULTS["port"]
    baudrate: int = TRANSPORT_DEFAULTS["baudrate"]
    timeout: float = TRANSPORT_DEFAULTS["timeout"]
    target_freq: int = MOTION_PROFILE_DEFAULTS["target_freq"]
    accel_pulses: int = MOTION_PROFILE_DEFAULTS["accel_pulses"]
    decel_pulses: int = MOTION_PROFILE_DEFAULTS["decel_pulses"]

    def __post_init__(self):
        if self.kind not in ("file", "remote", "serial"):
            raise ConfigurationError(f"Unknown transport kind: {self.kind!r}")
        if self.frame_format not in ("basic", "extended"):
            raise ConfigurationError(f"Unknown frame format: {self.frame_format!r}")


@dataclass
class DeltaConfig:
    """Complete configuration, loaded once at startup"""

    geometry: GeometryConfig = field(default_factory=GeometryConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    path: PathConfig = field(default_factory=PathConfig)
    transport: TransportConfig = field(default_factory=TransportConfig)

    _SECTIONS = {
        "geometry": GeometryConfig,
        "calibration": CalibrationConfig,
        "path": PathConfig,
        "transport": TransportConfig,
    }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DeltaConfig":
        """Build config from a nested dict, unspecified values use defaults"""
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration root must be a mapping")

        unknown = set(data) - set(cls._SECTIONS)
        if unknown:
            raise ConfigurationError(f"Unknown config sections: {sorted(unknown)}")

        sections = {}
        for name, section_cls in cls._SECTIONS.items():
            values = data.get(name) or {}
            if not isinstance(values, dict):
                raise ConfigurationError(f"Section '{name}' must be a mapping")
            try:
                sections[name] = section_cls(**values)
            except TypeError as e:
                raise ConfigurationError(f"Invalid '{name}' section: {e}") from e

        return cls(**sections)

    @classmethod
    def load(cls, filepath: str = None) -> "DeltaConfig":
        """Load config from YAML file"""
        if filepath is None:
            filepath = cls._get_default_path()

        if not os.path.exists(filepath):
            logger.info(f"No config at {filepath}, using defaults")
            return cls()

        try:
            with open(filepath, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Could not parse {filepath}: {e}") from e

        config = cls.from_dict(data)
        logger.info(f"📄 Loaded config from {filepath}")
        return config

    def save(self, filepath: str = None):
        """Save config to YAML file"""
        if filepath is None:
            filepath = self._get_default_path()

        # Ensure directory exists
        directory = os.path.dirname(filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)

        data = asdict(self)
        data["path"]["waypoints"] = [list(p) for p in self.path.waypoints]
        with open(filepath, 'w') as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    @staticmethod
    def _get_default_path() -> str:
        """Get default config path"""
        home = Path.home()
        return str(home / ".deltabot" / "config.yaml")
