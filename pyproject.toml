[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chatnet"
version = "0.1.0"
description = "Building blocks for a packet-based chat server: ring and serialization buffers, packet layouts, sessions, packet dispatch, rooms, a monitor and a memory pool."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "chat",
    "networking",
    "ring buffer",
    "serialization",
    "sessions",
    "packets",
    "memory pool",
]
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
    "Topic :: Communications :: Chat",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["chatnet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
