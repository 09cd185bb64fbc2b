"""Per-leg configuration read from a hierarchical parameter set."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from legkin.angles import deg_to_position
from legkin.kinematics import LegGeometry

__all__ = [
    "ConfigError",
    "ControlParams",
    "JointSettings",
    "LegConfig",
    "topic_names",
    "MAX_VELOCITY_LIMIT",
]

MAX_VELOCITY_LIMIT = 1023

_UINT32 = 1 << 32
_JOINTS = ("coxa", "femur", "tibia")
_MISSING = object()


class ConfigError(ValueError):
    """Raised when the leg configuration is missing or invalid."""


@dataclass(frozen=True)
class ControlParams:
    """Servo position and velocity limits and the state update rate."""

    position_max: int = 4095
    position_min: int = 0
    velocity_limit: int = MAX_VELOCITY_LIMIT
    update_rate: float = 50.0


@dataclass(frozen=True)
class JointSettings:
    """Servo id, zero offset in ticks and rotation direction of one joint."""

    motor_id: int
    offset: int = 0
    direction: int = 1


def _lookup(params: Mapping[str, Any], name: str) -> Any:
    """Find ``name`` either as a flat key or by walking nested mappings."""
    if name in params:
        return params[name]
    stripped = name.lstrip("/")
    if stripped in params:
        return params[stripped]
    node: Any = params
    for part in stripped.split("/"):
        if not isinstance(node, Mapping) or part not in node:
            return _MISSING
        node = node[part]
    return node


def _get(params: Mapping[str, Any], name: str, default: Any, kind: type) -> Any:
    value = _lookup(params, name)
    if value is _MISSING:
        return default
    try:
        return kind(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Parameter {name} has invalid value {value!r}") from exc


def topic_names(leg_id: str) -> dict[str, str]:
    """Return the topic names used by the controller of ``leg_id``."""
    prefix = f"/asterisk/leg/{leg_id}"
    return {
        "command": f"{prefix}/command/joint_angles",
        "position_command": f"{prefix}/command/foot_position",
        "state": f"{prefix}/state/read_angle",
        "foot_position": f"{prefix}/state/foot_position",
        "joint_angles": f"{prefix}/state/joint_angles",
    }


@dataclass(frozen=True)
class LegConfig:
    """Everything a single leg controller needs to run."""

    leg_id: str
    device_name: str
    coxa: JointSettings
    femur: JointSettings
    tibia: JointSettings
    baud_rate: int = 57600
    protocol_version: int = 2
    control: ControlParams = field(default_factory=ControlParams)
    geometry: LegGeometry = field(default_factory=LegGeometry)

    @property
    def joints(self) -> tuple[JointSettings, JointSettings, JointSettings]:
        """The joints in coxa, femur, tibia order."""
        return (self.coxa, self.femur, self.tibia)

    @property
    def motor_ids(self) -> list[int]:
        """Servo ids in coxa, femur, tibia order."""
        return [joint.motor_id for joint in self.joints]

    @property
    def topics(self) -> dict[str, str]:
        """Topic names for this leg."""
        return topic_names(self.leg_id)

    @classmethod
    def from_params(cls, params: Mapping[str, Any], leg_id: str) -> LegConfig:
        """Build and validate the configuration of ``leg_id`` from ``params``."""
        device_name = _lookup(params, f"/dynamixel/devices/{leg_id}")
        if device_name is _MISSING:
            raise ConfigError(f"[{leg_id}] Failed to get device_name from parameters")

        motor_ids = _lookup(params, f"/dynamixel/motor_ids/{leg_id}")
        if motor_ids is _MISSING:
            raise ConfigError(f"[{leg_id}] Failed to get motor IDs from parameters")
        try:
            motor_ids = [int(i) & 0xFF for i in motor_ids]
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"[{leg_id}] Invalid motor IDs {motor_ids!r}") from exc
        if len(motor_ids) != len(_JOINTS):
            raise ConfigError(
                f"[{leg_id}] Expected {len(_JOINTS)} motor IDs, got {len(motor_ids)}"
            )

        control = ControlParams(
            position_max=_get(params, "/control/position_limit/max", 4095, int) % _UINT32,
            position_min=_get(params, "/control/position_limit/min", 0, int) % _UINT32,
            velocity_limit=_get(params, "/control/velocity_limit", MAX_VELOCITY_LIMIT, int)
            % _UINT32,
            update_rate=_get(params, "/control/update_rate", 50.0, float),
        )
        geometry = LegGeometry(
            coxa_length=_get(params, "/leg_geometry/coxa_length", 25.0, float),
            femur_length=_get(params, "/leg_geometry/femur_length", 105.0, float),
            tibia_length=_get(params, "/leg_geometry/tibia_length", 105.0, float),
        )
        joints = {
            name: JointSettings(
                motor_id=motor_id,
                offset=deg_to_position(
                    _get(params, f"/joint_zero_position/{name}_offset", 0.0, float)
                ),
                direction=_get(params, f"/joint_direction/{name}_direction", 1, int),
            )
            for name, motor_id in zip(_JOINTS, motor_ids)
        }

        config = cls(
            leg_id=leg_id,
            device_name=str(device_name),
            baud_rate=_get(params, "/dynamixel/baud_rate", 57600, int),
            protocol_version=_get(params, "/dynamixel/protocol_version", 2, int),
            control=control,
            geometry=geometry,
            **joints,
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Raise ConfigError when limits, link lengths or directions are invalid."""
        prefix = f"[{self.leg_id}]"
        if self.control.position_min >= self.control.position_max:
            raise ConfigError(f"{prefix} Invalid position limits: min >= max")
        if self.control.velocity_limit > MAX_VELOCITY_LIMIT:
            raise ConfigError(
                f"{prefix} Invalid velocity limit: must be <= {MAX_VELOCITY_LIMIT}"
            )
        geometry = self.geometry
        if min(geometry.coxa_length, geometry.femur_length, geometry.tibia_length) <= 0:
            raise ConfigError(f"{prefix} Invalid link lengths: must be positive")
        if any(abs(joint.direction) != 1 for joint in self.joints):
            raise ConfigError(f"{prefix} Invalid joint direction values: must be 1 or -1")