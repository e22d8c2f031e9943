[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "logmonitor"
version = "0.1.0"
description = "Storage layer for a remote log integrity monitor: servers, log files, hashed entries, chunk hashes and check results."
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = ["logging", "integrity", "monitoring", "repository", "storage"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["logmonitor"]

[tool.hatch.build.targets.sdist]
include = ["logmonitor", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
