[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "space_defender"
version = "0.1.0"
description = "A small top-down arcade shooter: pick a hero, shoot falling enemies, catch hearts."
requires-python = ">=3.10"
keywords = ["game", "arcade", "shooter", "pygame"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Arcade",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
space-defender = "space_defender.app:main"

[tool.hatch.build.targets.wheel]
packages = ["space_defender"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
