import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from legkin.angles import validate_angle
from legkin.kinematics import (
    FootPosition,
    JointAngles,
    KinematicsError,
    LegGeometry,
    forward_kinematics,
    inverse_kinematics,
    is_near_singularity,
)

GEOMETRY = LegGeometry()

coxa_angles = st.floats(min_value=-1.5, max_value=1.5)
femur_angles = st.floats(min_value=0.0, max_value=1.0)
tibia_angles = st.floats(min_value=-2.0, max_value=-0.2)


def test_default_geometry_matches_source_defaults():
    assert (GEOMETRY.coxa_length, GEOMETRY.femur_length, GEOMETRY.tibia_length) == (
        25.0,
        105.0,
        105.0,
    )


def test_forward_at_zero_is_fully_stretched():
    pos = forward_kinematics(GEOMETRY, 0.0, 0.0, 0.0)
    total = GEOMETRY.coxa_length + GEOMETRY.femur_length + GEOMETRY.tibia_length
    assert pos.x == pytest.approx(total)
    assert pos.y == pytest.approx(0.0)
    assert pos.z == pytest.approx(0.0)


@given(coxa_angles, femur_angles, tibia_angles)
def test_forward_coxa_rotates_about_vertical(coxa, femur, tibia):
    base = forward_kinematics(GEOMETRY, 0.0, femur, tibia)
    turned = forward_kinematics(GEOMETRY, coxa, femur, tibia)
    assert turned.z == pytest.approx(base.z, abs=1e-9)
    assert math.hypot(turned.x, turned.y) == pytest.approx(abs(base.x), abs=1e-9)


@given(coxa_angles, femur_angles, tibia_angles)
def test_inverse_recovers_joint_angles(coxa, femur, tibia):
    target = forward_kinematics(GEOMETRY, coxa, femur, tibia)
    solution = inverse_kinematics(GEOMETRY, *target)
    assert solution.coxa == pytest.approx(coxa, abs=1e-6)
    assert solution.femur == pytest.approx(femur, abs=1e-6)
    assert solution.tibia == pytest.approx(tibia, abs=1e-6)


@given(coxa_angles, femur_angles, tibia_angles)
def test_inverse_then_forward_round_trip(coxa, femur, tibia):
    target = forward_kinematics(GEOMETRY, coxa, femur, tibia)
    solution = inverse_kinematics(GEOMETRY, target.x, target.y, target.z)
    reached = forward_kinematics(GEOMETRY, *solution)
    assert reached.x == pytest.approx(target.x, abs=1e-6)
    assert reached.y == pytest.approx(target.y, abs=1e-6)
    assert reached.z == pytest.approx(target.z, abs=1e-6)
    assert all(validate_angle(a) for a in solution)
    assert solution.tibia <= 0.0


def test_inverse_mirror_in_y_flips_coxa():
    target = forward_kinematics(GEOMETRY, 0.7, 0.3, -1.0)
    left = inverse_kinematics(GEOMETRY, target.x, target.y, target.z)
    right = inverse_kinematics(GEOMETRY, target.x, -target.y, target.z)
    assert right.coxa == pytest.approx(-left.coxa)
    assert right.femur == pytest.approx(left.femur)
    assert right.tibia == pytest.approx(left.tibia)


def test_inverse_too_far_raises():
    with pytest.raises(KinematicsError, match="too far"):
        inverse_kinematics(GEOMETRY, 1000.0, 0.0, 0.0)


def test_inverse_fully_stretched_is_out_of_reach():
    total = GEOMETRY.coxa_length + GEOMETRY.femur_length + GEOMETRY.tibia_length
    with pytest.raises(KinematicsError, match="too far"):
        inverse_kinematics(GEOMETRY, total, 0.0, 0.0)


def test_inverse_too_close_raises():
    with pytest.raises(KinematicsError, match="too close"):
        inverse_kinematics(GEOMETRY, GEOMETRY.coxa_length, 0.0, 0.0)


def test_inverse_unequal_links_too_close():
    geometry = LegGeometry(coxa_length=10.0, femur_length=100.0, tibia_length=50.0)
    with pytest.raises(KinematicsError, match="too close"):
        inverse_kinematics(geometry, geometry.coxa_length + 20.0, 0.0, 0.0)


def test_kinematics_error_is_value_error():
    with pytest.raises(ValueError):
        inverse_kinematics(GEOMETRY, 0.0, 0.0, 5000.0)


def test_results_unpack_in_order():
    angles = JointAngles(0.1, 0.2, -0.3)
    position = FootPosition(1.0, 2.0, 3.0)
    assert tuple(angles) == (0.1, 0.2, -0.3)
    assert tuple(position) == (1.0, 2.0, 3.0)


def test_singularity_detection():
    assert is_near_singularity(0.0, 0.0, 0.0)
    assert is_near_singularity(0.0, 0.0, math.pi)
    assert is_near_singularity(0.0, 0.0, 0.005)
    assert not is_near_singularity(0.0, 0.0, -1.0)
    assert not is_near_singularity(0.0, 0.0, -math.pi)


@given(st.floats(min_value=-3.0, max_value=3.0), st.floats(min_value=-3.0, max_value=3.0))
def test_singularity_ignores_coxa_and_femur(coxa, femur):
    assert is_near_singularity(coxa, femur, 0.0)
    assert not is_near_singularity(coxa, femur, 1.0)