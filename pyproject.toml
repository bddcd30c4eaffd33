[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vhalclient"
version = "1.0.0"
description = "Stream socket clients and wire formats for the virtual hardware abstraction layers of Android instances in containers and VMs."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "android",
    "vhal",
    "camera",
    "audio",
    "sensor",
    "gps",
    "nmea",
    "yuv",
    "vsock",
    "unix-socket",
    "emulator",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Multimedia :: Video",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
vhal-camera-stream = "vhalclient.camera_stream:main"

[tool.hatch.build.targets.wheel]
packages = ["vhalclient"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
