[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "appendkv"
version = "0.1.0"
description = "In-memory append-only key-value store with a hash-chained log, named collections and a request/response layer"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "append-only", "key-value", "collections", "immutable", "hash-chain"]
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
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
appendkv-demo = "appendkv.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["appendkv"]

[tool.pytest.ini_options]
addopts = "-ra"
