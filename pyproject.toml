[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "reactor_http"
version = "0.1.0"
description = "A reactor-style TCP and HTTP/1.1 server library with event loops, a timer wheel and regex routing."
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "server", "reactor", "event-loop", "tcp", "timer-wheel", "networking"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
reactor-http-demo = "reactor_http.app:main"
reactor-http-echo = "reactor_http.echo_server:main"

[tool.hatch.build.targets.wheel]
packages = ["reactor_http"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
