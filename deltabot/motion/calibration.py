"""
Calibration table and angle correction
Measured arm angles at known heights are compared with the
inverse kinematics result, the difference is interpolated
and added to every computed move
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Callable, Iterable, List, Mapping, Optional, Tuple, Union

from ..config import OutOfRangePolicy
from ..exceptions import CalibrationOutOfRange, ConfigurationError, Unreachable
from .kinematics import JointAngles, unwrap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalibrationSample:
    """One rig measurement, shared by all three arms"""
    z: float
    measured_angle_deg: float


@dataclass(frozen=True)
class CalibrationPoint:
    """Sample plus the angle the solver predicts for it"""
    z: float
    measured_angle_deg: float
    computed_angle_deg: float
    error_deg: float


SampleLike = Union[CalibrationSample, Mapping[str, float], Tuple[float, float]]


def _as_sample(raw: SampleLike) -> CalibrationSample:
    if isinstance(raw, CalibrationSample):
        return raw
    try:
        if isinstance(raw, Mapping):
            return CalibrationSample(float(raw["z"]), float(raw["angle"]))
        z, angle = raw
        return CalibrationSample(float(z), float(angle))
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid calibration sample {raw!r}: {e}") from e


class CalibrationTable:
    """Ordered calibration points, immutable once built"""

    def __init__(self, points: Iterable[CalibrationPoint]):
        self._points = tuple(points)
        self._z = np.array([p.z for p in self._points], dtype=float)
        self._error = np.array([p.error_deg for p in self._points], dtype=float)

        if len(self._points) < 2:
            raise ConfigurationError("Calibration table needs at least two samples")
        if np.any(np.diff(self._z) <= 0):
            raise ConfigurationError("Calibration heights must be strictly increasing")

    @classmethod
    def build(cls, samples: Iterable[SampleLike],
              inverse: Callable[[float, float, float], JointAngles]) -> "CalibrationTable":
        """
        Build table from rig measurements

        Args:
            samples: (z, measured angle) pairs, dicts with z/angle or
                CalibrationSample objects, in any order
            inverse: Inverse kinematics used to predict each angle

        Raises:
            ConfigurationError: duplicate or unreachable heights,
                or fewer than two samples
        """
        ordered = sorted((_as_sample(s) for s in samples), key=lambda s: s.z)

        points = []
        for sample in ordered:
            try:
                angles = inverse(0.0, 0.0, sample.z)
            except Unreachable as e:
                raise ConfigurationError(
                    f"Calibration height z={sample.z} is unreachable: {e}"
                ) from e

            computed = unwrap(angles.theta1)
            measured = unwrap(sample.measured_angle_deg)
            points.append(CalibrationPoint(
                z=sample.z,
                measured_angle_deg=measured,
                computed_angle_deg=computed,
                error_deg=measured - computed
            ))

        table = cls(points)
        logger.info(
            f"🎯 Calibration table built: {len(points)} samples, "
            f"z {table.z_min:.1f} to {table.z_max:.1f}"
        )
        return table

    @property
    def points(self) -> Tuple[CalibrationPoint, ...]:
        return self._points

    @property
    def z_min(self) -> float:
        return self._points[0].z

    @property
    def z_max(self) -> float:
        return self._points[-1].z

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def interpolate_error(self, z: float) -> float:
        """
        Interpolated angle error at height z

        Raises:
            CalibrationOutOfRange: z outside [z_min, z_max]
        """
        if not self.z_min <= z <= self.z_max:
            raise CalibrationOutOfRange(z, self.z_min, self.z_max)

        # Index of the last knot at or below z, kept inside the table
        i = int(np.searchsorted(self._z, z, side='right')) - 1
        i = min(i, len(self._z) - 2)

        z_p, z_q = self._z[i], self._z[i + 1]
        t = (z - z_p) / (z_q - z_p)

        # Exact at both knots
        return float((1.0 - t) * self._error[i] + t * self._error[i + 1])


class Corrector:
    """Apply unwrap and calibration error to raw solver output"""

    def __init__(self, table: Optional[CalibrationTable] = None,
                 policy: OutOfRangePolicy = OutOfRangePolicy.ZERO):
        self.table = table
        self.policy = policy

    def error_at(self, z: float) -> float:
        """Correction for height z according to the out-of-range policy"""
        if self.table is None:
            return 0.0

        try:
            return self.table.interpolate_error(z)
        except CalibrationOutOfRange as e:
            if self.policy is OutOfRangePolicy.REJECT:
                raise
            logger.warning(f"⚠️ {e} - no correction applied")
            return 0.0

    def correct(self, raw_angle: float, z: float) -> float:
        """Corrected angle for one arm"""
        return unwrap(raw_angle) + self.error_at(z)

    def correct_angles(self, raw: JointAngles, z: float) -> JointAngles:
        """Correct all three arms with one lookup"""
        error = self.error_at(z)
        return JointAngles(*(unwrap(angle) + error for angle in raw))

    def report(self) -> List[dict]:
        """Table rows for display"""
        if self.table is None:
            return []
        return [
            {
                "z": p.z,
                "measured": p.measured_angle_deg,
                "computed": p.computed_angle_deg,
                "error": p.error_deg
            }
            for p in self.table
        ]
