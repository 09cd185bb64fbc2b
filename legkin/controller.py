"""Single leg controller: turns joint and foot commands into servo writes."""

from __future__ import annotations

import abc
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from legkin.angles import angle_to_position, normalize_angle, position_to_angle
from legkin.config import LegConfig
from legkin.kinematics import (
    FootPosition,
    JointAngles,
    forward_kinematics,
    inverse_kinematics,
)

__all__ = [
    "DEFAULT_IK_VELOCITY",
    "CommandError",
    "LegCommand",
    "ServoBus",
    "LegController",
]

logger = logging.getLogger(__name__)

DEFAULT_IK_VELOCITY = 0.5


class CommandError(ValueError):
    """Raised when a command would drive a servo outside its configured limits."""


@dataclass(frozen=True)
class LegCommand:
    """Joint angles in radians and a velocity fraction in [0, 1]."""

    coxa_angle: float
    femur_angle: float
    tibia_angle: float
    velocity: float = 0.0

    @property
    def angles(self) -> JointAngles:
        """The joint angles of the command."""
        return JointAngles(self.coxa_angle, self.femur_angle, self.tibia_angle)


class ServoBus(abc.ABC):
    """The servo bus a leg is attached to. Methods raise on communication failure."""

    @abc.abstractmethod
    def open(self) -> None:
        """Open the port and set the baud rate."""

    @abc.abstractmethod
    def enable_torques(self, ids: Sequence[int], enable: bool) -> None:
        """Switch torque on or off for every servo in ``ids``."""

    @abc.abstractmethod
    def sync_write_position_velocity(
        self, ids: Sequence[int], positions: Sequence[int], velocities: Sequence[int]
    ) -> None:
        """Write goal velocities and goal positions to all servos at once."""

    @abc.abstractmethod
    def sync_read_positions(self, ids: Sequence[int]) -> list[int]:
        """Read the present position of every servo in ``ids``, in order."""


FootCallback = Callable[[FootPosition], None]
CommandCallback = Callable[[LegCommand], None]


class LegController:
    """Drives the three servos of one leg from joint or foot-position commands."""

    def __init__(
        self,
        config: LegConfig,
        bus: ServoBus,
        on_foot_position: FootCallback | None = None,
        on_joint_angles: CommandCallback | None = None,
        on_state: CommandCallback | None = None,
    ) -> None:
        self.config = config
        self.bus = bus
        self.on_foot_position = on_foot_position
        self.on_joint_angles = on_joint_angles
        self.on_state = on_state

    def _log_prefix(self) -> str:
        return f"[{self.config.leg_id}]"

    def initialize(self) -> None:
        """Open the bus and enable torque on the leg's servos."""
        self.bus.open()
        self.bus.enable_torques(self.config.motor_ids, True)
        logger.info("%s Initialization completed successfully", self._log_prefix())

    def is_within_limits(self, position: int, velocity: int) -> bool:
        """Return True when position and velocity lie within the control limits."""
        control = self.config.control
        if not control.position_min <= position <= control.position_max:
            logger.error(
                "%s Position %d out of limits [%d, %d]",
                self._log_prefix(),
                position,
                control.position_min,
                control.position_max,
            )
            return False
        if velocity > control.velocity_limit:
            logger.error(
                "%s Velocity %d exceeds limit %d",
                self._log_prefix(),
                velocity,
                control.velocity_limit,
            )
            return False
        return True

    def handle_command(self, command: LegCommand) -> FootPosition:
        """Move the servos to the commanded joint angles.

        Returns the foot position reached, which is also passed to
        ``on_foot_position``. Raises CommandError when a target is out of limits.
        """
        angles = [normalize_angle(a) for a in command.angles]
        positions = [
            angle_to_position(angle, joint.offset, joint.direction)
            for angle, joint in zip(angles, self.config.joints)
        ]

        check_velocity = int(command.velocity)
        if not all(self.is_within_limits(p, check_velocity) for p in positions):
            raise CommandError(f"{self._log_prefix()} Command values out of limits")

        velocity = int(command.velocity * self.config.control.velocity_limit)
        self.bus.sync_write_position_velocity(
            self.config.motor_ids, positions, [velocity] * len(positions)
        )

        foot = forward_kinematics(self.config.geometry, *angles)
        if self.on_foot_position is not None:
            self.on_foot_position(foot)
        return foot

    def handle_position_command(self, position: FootPosition) -> LegCommand:
        """Move the foot to ``position`` by inverse kinematics.

        The solved joint angles are passed to ``on_joint_angles`` and then
        executed. Raises KinematicsError when the target cannot be reached.
        """
        solution = inverse_kinematics(self.config.geometry, *position)
        coxa, femur, tibia = (normalize_angle(a) for a in solution)
        command = LegCommand(coxa, femur, tibia, DEFAULT_IK_VELOCITY)
        if self.on_joint_angles is not None:
            self.on_joint_angles(command)
        self.handle_command(command)
        return command

    def read_state(self) -> LegCommand:
        """Read the present joint angles; also passed to ``on_state``."""
        positions = self.bus.sync_read_positions(self.config.motor_ids)
        coxa, femur, tibia = (
            position_to_angle(pos, joint.offset, joint.direction)
            for pos, joint in zip(positions, self.config.joints)
        )
        state = LegCommand(coxa, femur, tibia)
        if self.on_state is not None:
            self.on_state(state)
        return state