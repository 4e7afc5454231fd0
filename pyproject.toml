[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sr2700"
version = "0.1.0"
description = "Host-side driver for brushless motor control modules over a CRC-checked serial bus"
requires-python = ">=3.10"
dependencies = [
    "pyserial",
]
keywords = ["brushless", "motor", "servo", "serial", "modbus-crc", "drive", "pid"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Manufacturing",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["sr2700"]

[tool.pytest.ini_options]
addopts = "-ra"
