"""Angle conversion, leg kinematics, per-leg configuration and servo command handling."""

__version__ = "0.1.0"
__all__ = ["angles", "kinematics", "config", "controller"]