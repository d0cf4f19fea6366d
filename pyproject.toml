[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "novacom"
version = "0.1.0"
description = "Wire buffers, checksums, token authentication and host/device command services for the novacom device link"
requires-python = ">=3.10"
dependencies = []
keywords = ["novacom", "usb", "embedded", "authentication", "tokens", "sha1", "adler32"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["novacom"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
