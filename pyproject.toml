[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xkit"
version = "0.1.0"
description = "Application containers, command trees, typed errors, Myers diffs, configuration sources and small utilities"
requires-python = ">=3.11"
dependencies = [
    "pyyaml",
]
keywords = [
    "cli",
    "application",
    "environment",
    "errors",
    "diff",
    "myers",
    "configuration",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["xkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
warn_redundant_casts = true
