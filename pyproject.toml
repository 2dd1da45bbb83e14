[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bnuuyterm"
version = "0.1.0"
description = "Terminal emulation core: escape-sequence parsing, screen grid with scrollback, hyperlinks, selection and render preparation"
requires-python = ">=3.11"
dependencies = [
    "platformdirs",
]
keywords = ["terminal", "emulator", "vt100", "xterm", "ansi", "escape-sequences"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals :: Terminal Emulators/X Terminals",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["bnuuyterm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
