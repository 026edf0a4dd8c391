[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "taskrunner"
version = "0.1.0"
description = "A small HTTP service that queues typed background tasks and runs them one at a time per type."
requires-python = ">=3.10"
dependencies = []
keywords = ["tasks", "queue", "worker", "http", "wsgi"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
taskrunner = "taskrunner.server:main"

[tool.hatch.build.targets.wheel]
packages = ["taskrunner"]

[tool.pytest.ini_options]
addopts = "-ra"
