[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gbsplay"
version = "0.1.0"
description = "Game Boy sound player building blocks: subsong logic, status display, output plugins, MIDI and I/O dumpers, cartridge mappers"
requires-python = ">=3.10"
dependencies = []
keywords = ["gameboy", "gbs", "chiptune", "midi", "audio", "player"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Players",
    "Topic :: Multimedia :: Sound/Audio :: MIDI",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gbsplay-gen-impulse = "gbsplay.impulsegen:main"

[tool.hatch.build.targets.wheel]
packages = ["gbsplay"]

[tool.pytest.ini_options]
addopts = "-ra"
