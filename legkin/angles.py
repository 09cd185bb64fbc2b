"""Conversions between joint angles in radians and servo positions in ticks."""

import logging
import math

__all__ = [
    "TICKS_PER_REVOLUTION",
    "validate_angle",
    "normalize_angle",
    "angle_to_position",
    "position_to_angle",
    "deg_to_position",
]

logger = logging.getLogger(__name__)

TICKS_PER_REVOLUTION = 4096
_HALF_TURN_TICKS = 2048.0


def validate_angle(angle: float) -> bool:
    """Return True when ``angle`` lies within [-pi, pi]."""
    return -math.pi <= angle <= math.pi


def normalize_angle(angle: float) -> float:
    """Wrap an angle into [-pi, pi]; angles already in range are returned unchanged."""
    if validate_angle(angle):
        return angle
    wrapped = math.fmod(angle + math.pi, 2.0 * math.pi)
    if wrapped < 0:
        wrapped += 2.0 * math.pi
    wrapped -= math.pi
    logger.debug("Angle %f wrapped to %f", angle, wrapped)
    return wrapped


def angle_to_position(angle: float, offset: int, direction: int) -> int:
    """Convert a joint angle in radians to a servo position in 0..4095.

    The angle is wrapped to [-pi, pi], multiplied by ``direction`` and shifted
    so that zero radians maps to the middle of the range; ``offset`` ticks are
    then added and the result wrapped to one revolution.
    """
    angle = normalize_angle(angle) * direction
    raw = int((angle + math.pi) * _HALF_TURN_TICKS / math.pi) + offset
    return raw % TICKS_PER_REVOLUTION


def position_to_angle(position: int, offset: int, direction: int) -> float:
    """Convert a servo position in ticks back to a joint angle in radians."""
    ticks = (position - offset) % TICKS_PER_REVOLUTION
    angle = ticks * 2.0 * math.pi / TICKS_PER_REVOLUTION - math.pi
    return angle * direction


def deg_to_position(angle: float) -> int:
    """Convert an angle in degrees to a tick count, truncating toward zero."""
    position = int(angle * _HALF_TURN_TICKS / 180.0)
    logger.debug("deg_to_position: %f degrees is %d ticks", angle, position)
    return position