"""Forward and inverse kinematics for a three-joint (coxa, femur, tibia) leg."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass

from legkin.angles import validate_angle

__all__ = [
    "EPSILON",
    "SINGULARITY_THRESHOLD",
    "KinematicsError",
    "JointAngles",
    "FootPosition",
    "LegGeometry",
    "inverse_kinematics",
    "forward_kinematics",
    "is_near_singularity",
]

logger = logging.getLogger(__name__)

EPSILON = 1e-6
SINGULARITY_THRESHOLD = 0.01


class KinematicsError(ValueError):
    """Raised when a target cannot be reached or yields invalid joint angles."""


@dataclass(frozen=True)
class JointAngles:
    """Joint angles in radians."""

    coxa: float
    femur: float
    tibia: float

    def __iter__(self) -> Iterator[float]:
        return iter((self.coxa, self.femur, self.tibia))


@dataclass(frozen=True)
class FootPosition:
    """Foot position in the leg's base frame, in the units of the link lengths."""

    x: float
    y: float
    z: float

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))


@dataclass(frozen=True)
class LegGeometry:
    """Link lengths of the leg."""

    coxa_length: float = 25.0
    femur_length: float = 105.0
    tibia_length: float = 105.0


def inverse_kinematics(geometry: LegGeometry, x: float, y: float, z: float) -> JointAngles:
    """Solve the elbow-down joint angles that put the foot at (x, y, z).

    Raises KinematicsError when the target is too far, too close, or the
    resulting angles fall outside [-pi, pi].
    """
    femur = geometry.femur_length
    tibia = geometry.tibia_length

    coxa_angle = math.atan2(y, x)
    horizontal = math.hypot(x, y) - geometry.coxa_length
    reach = math.sqrt(horizontal * horizontal + z * z)
    logger.debug("IK: coxa=%f horizontal=%f reach=%f", coxa_angle, horizontal, reach)

    if reach > femur + tibia - EPSILON:
        raise KinematicsError(
            f"Target position out of reach (too far): {reach:f} > {femur + tibia:f}"
        )
    if reach < abs(femur - tibia) + EPSILON:
        raise KinematicsError(
            f"Target position out of reach (too close): {reach:f} < {abs(femur - tibia):f}"
        )

    cos_tibia = (reach * reach - femur * femur - tibia * tibia) / (2.0 * femur * tibia)
    if cos_tibia > 1.0 - EPSILON:
        tibia_angle = 0.0
    elif cos_tibia < -1.0 + EPSILON:
        tibia_angle = math.pi
    else:
        tibia_angle = math.acos(cos_tibia)
    tibia_angle = -tibia_angle

    gamma = math.atan2(z, horizontal)
    alpha = math.atan2(
        tibia * math.sin(tibia_angle), femur + tibia * math.cos(tibia_angle)
    )
    femur_angle = gamma - alpha
    logger.debug("IK: gamma=%f alpha=%f femur=%f tibia=%f", gamma, alpha, femur_angle, tibia_angle)

    if not all(validate_angle(a) for a in (coxa_angle, femur_angle, tibia_angle)):
        raise KinematicsError("Joint angles out of valid range")

    if abs(reach) < EPSILON:
        logger.warning("Near singularity: target point close to coxa axis")

    return JointAngles(coxa_angle, femur_angle, tibia_angle)


def forward_kinematics(
    geometry: LegGeometry, coxa_angle: float, femur_angle: float, tibia_angle: float
) -> FootPosition:
    """Compute the foot position for the given joint angles."""
    cos_coxa = math.cos(coxa_angle)
    sin_coxa = math.sin(coxa_angle)
    knee = femur_angle + tibia_angle

    planar = (
        geometry.coxa_length
        + geometry.femur_length * math.cos(femur_angle)
        + geometry.tibia_length * math.cos(knee)
    )
    z = geometry.femur_length * math.sin(femur_angle) + geometry.tibia_length * math.sin(knee)
    return FootPosition(planar * cos_coxa, planar * sin_coxa, z)


def is_near_singularity(coxa_angle: float, femur_angle: float, tibia_angle: float) -> bool:
    """Return True when the tibia is close to fully stretched (0) or to pi."""
    return (
        abs(tibia_angle) < SINGULARITY_THRESHOLD
        or abs(tibia_angle - math.pi) < SINGULARITY_THRESHOLD
    )