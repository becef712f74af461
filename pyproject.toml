[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "adbkit"
version = "0.1.0"
description = "Client-side building blocks for the Android Debug Bridge: wire protocol, host commands, sync stats, TCP/USB packets and ADB public keys."
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = ["adb", "android", "debug-bridge", "protocol", "device"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
adbkit = "adbkit.cli:main"
adbkit-keycodes = "adbkit.keycode_task:main"

[tool.hatch.build.targets.wheel]
packages = ["adbkit"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
