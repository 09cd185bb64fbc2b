# legkin

Kinematics and command handling for a three-joint robot leg (coxa, femur,
tibia) driven by 12-bit position servos.

## What it does

- `legkin.angles` converts between joint angles in radians and servo
  positions in ticks (0–4095, 4096 per revolution). It applies zero offsets
  in ticks and a rotation direction of 1 or -1. `normalize_angle` wraps an
  angle into −π…π. `deg_to_position` turns degrees into ticks and truncates
  toward zero.
- `legkin.kinematics` computes forward and inverse kinematics for a leg
  described by a `LegGeometry` (coxa, femur and tibia lengths; defaults 25,
  105, 105). `inverse_kinematics` returns the elbow-down solution as
  `JointAngles`. It raises `KinematicsError` when the target is too far,
  too close, or gives angles outside −π…π. `forward_kinematics` returns a
  `FootPosition`. `is_near_singularity` reports a tibia angle within 0.01 rad
  of 0 or π.
- `legkin.config` builds a per-leg `LegConfig` with
  `LegConfig.from_params(params, leg_id)`. Parameters are looked up by path,
  such as `/dynamixel/devices/<leg_id>`, `/dynamixel/motor_ids/<leg_id>`,
  `/control/position_limit/max` or `/leg_geometry/femur_length`. A path may
  be a flat key or nested mappings. Missing optional values take their
  defaults. The device name and the three motor ids are required.
  `LegConfig.validate` raises `ConfigError` for invalid position limits, a
  velocity limit above 1023, non-positive link lengths, or directions other
  than ±1. `topic_names(leg_id)` gives the topic names for one leg, under
  `/asterisk/leg/<leg_id>`.
- `legkin.controller` provides `LegController`. It turns joint-angle commands
  (`LegCommand`) and foot-position commands (`FootPosition`) into synchronized
  velocity and position writes on a `ServoBus`. It also reads back the
  present joint state. Optional callbacks receive the results:
  `on_foot_position`, `on_joint_angles` and `on_state`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from legkin.kinematics import LegGeometry, forward_kinematics, inverse_kinematics

leg = LegGeometry(coxa_length=25.0, femur_length=105.0, tibia_length=105.0)

angles = inverse_kinematics(leg, 150.0, 0.0, -60.0)
foot = forward_kinematics(leg, angles.coxa, angles.femur, angles.tibia)
print(angles, foot)
```

For the servo side, subclass `ServoBus` and implement `open`,
`enable_torques`, `sync_write_position_velocity` and `sync_read_positions`
for your hardware. Pass it to `LegController` together with a `LegConfig`.
Call `initialize()` once to open the bus and enable torque.

After that:

- `handle_command(LegCommand(...))` returns the resulting `FootPosition`. It
  raises `CommandError` when a servo target is outside the configured limits.
- `handle_position_command(FootPosition(...))` solves the joint angles and
  executes them at velocity 0.5.
- `read_state()` returns the present joint angles as a `LegCommand`.

## What it does not do

The package has no servo driver: `ServoBus` is only an abstract interface, and
talking to actual servos is up to your implementation. It also has no
messaging layer and no command-line program. `topic_names` only produces
names; nothing subscribes or publishes on them. There is no built-in loop
that polls the state at `ControlParams.update_rate`; call `read_state()`
yourself.