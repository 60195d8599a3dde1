[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "yolo"
version = "0.1.0"
description = "An in-memory limit order book with price-level matching and a small JSON HTTP API"
requires-python = ">=3.11"
keywords = ["order book", "matching engine", "exchange", "trading", "limit order"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Office/Business :: Financial :: Investment",
]
dependencies = [
    "sortedcontainers>=2.4",
    "starlette>=0.37",
    "uvicorn>=0.29",
    "pyyaml>=6.0",
]

[project.optional-dependencies]
test = [
    "pytest>=8.0",
    "httpx>=0.27",
]

[project.scripts]
yolo-server = "yolo.server:main"

[tool.hatch.build.targets.wheel]
packages = ["yolo"]

[tool.pytest.ini_options]
addopts = "-ra"
