[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "legkin"
version = "0.1.0"
description = "Kinematics, joint-angle conversion and command handling for a three-joint robot leg driven by position servos"
requires-python = ">=3.10"
dependencies = []
keywords = ["robotics", "kinematics", "inverse-kinematics", "legged-robot", "servo", "hexapod"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["legkin"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
