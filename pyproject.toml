[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sparklog"
version = "0.1.0"
description = "Pattern-driven logging with pluggable sinks, padding, color ranges and backtraces"
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "logger", "sinks", "formatter", "pattern", "backtrace"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sparklog-bench = "sparklog.bench:main"

[tool.hatch.build.targets.wheel]
packages = ["sparklog"]

[tool.hatch.build.targets.sdist]
include = ["sparklog", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
