[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "crisco"
version = "0.1.0"
description = "A tiny single-threaded URL shortener HTTP server with an in-memory store"
requires-python = ">=3.10"
dependencies = []
keywords = ["url-shortener", "http", "server", "base62"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: No Input/Output (Daemon)",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
crisco = "crisco.server:main"

[tool.hatch.build.targets.wheel]
packages = ["crisco"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
