[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tinyweb"
version = "1.0.1"
description = "Building blocks for a small epoll-based static HTTP server: buffer, blocking deque, timer heap, thread pool, logger, request parser and response builder"
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "epoll", "static-files", "threadpool", "timer", "buffer", "logger"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tinyweb"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
