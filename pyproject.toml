[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tinyhttpdb"
version = "0.1.0"
description = "A small HTTP/1.1 server that serves static files and a SQLite-backed JSON API for user entries"
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "server", "sqlite", "json", "rest", "static-files"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tinyhttpdb-server = "tinyhttpdb.server:main"
tinyhttpdb-client = "tinyhttpdb.client:main"

[tool.hatch.build.targets.wheel]
packages = ["tinyhttpdb"]

[tool.hatch.build.targets.sdist]
include = ["tinyhttpdb", "tests", "pyproject.toml", "README.md"]

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
warn_redundant_casts = true
