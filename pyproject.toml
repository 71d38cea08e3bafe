[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "digcore"
version = "0.1.0"
description = "Building blocks for a monitoring agent: filters, shell-style command execution, layered configuration, reconnect backoff and an MCP tool client."
requires-python = ">=3.11"
keywords = [
    "monitoring",
    "agent",
    "filters",
    "glob",
    "shell",
    "configuration",
    "backoff",
    "mcp",
    "json-rpc",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "pyyaml>=6.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[tool.hatch.build.targets.wheel]
packages = ["digcore"]

[tool.hatch.build.targets.sdist]
include = ["digcore", "tests", "pyproject.toml", "README.md"]

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
