[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gnbcore"
version = "0.1.0"
description = "Building blocks for an overlay networking daemon: bounded heap, fixed pools and lists, linked lists, addresses and logging"
requires-python = ">=3.10"
dependencies = []
keywords = ["networking", "address", "ipv4", "ipv6", "logging", "udp", "linked-list", "pool"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
    "Topic :: System :: Logging",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gnbcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
