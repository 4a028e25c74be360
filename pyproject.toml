[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "manaflow"
version = "0.0.1"
description = "Game server, packet format, text protocol and chat commands for the Mana Flow card game"
requires-python = ">=3.10"
dependencies = []
keywords = ["card game", "game server", "protocol", "multiplayer", "chat commands"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Turn Based Strategy",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
manaflow-server = "manaflow.server:main"

[tool.hatch.build.targets.wheel]
packages = ["manaflow"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
