[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "quadflight"
version = "0.1.0"
description = "Quadcopter flight-control building blocks: PID axes, attitude estimation and control, DShot encoding and motor output"
requires-python = ">=3.10"
dependencies = []
keywords = ["quadcopter", "flight-control", "pid", "dshot", "attitude", "drone"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
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
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["quadflight"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
