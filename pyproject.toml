[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "redbase"
version = "0.1.0"
description = "Storage core for a wide-column, multi-version key-value store: filters, write-ahead memstore and SSTables"
requires-python = ">=3.10"
keywords = ["database", "wide-column", "mvcc", "sstable", "write-ahead-log", "memstore"]
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
    "Topic :: Database :: Database Engines/Servers",
    "Typing :: Typed",
]
dependencies = [
    "sortedcontainers",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["redbase"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
