[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wsproxy"
version = "0.1.0"
description = "A small WebSocket client that streams masked text frames, plus a minimal multi-port HTTP responder"
requires-python = ">=3.10"
dependencies = []
keywords = ["websocket", "http", "client", "server", "frames"]
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
    "Topic :: Internet :: WWW/HTTP",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
wsproxy = "wsproxy.cli:main"
wsproxy-server = "wsproxy.server:main"

[tool.hatch.build.targets.wheel]
packages = ["wsproxy"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
