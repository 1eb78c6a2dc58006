[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "buzzmon"
version = "0.1.0"
description = "A lightweight Linux resource monitor with a terminal dashboard and JSON reports"
requires-python = ">=3.10"
dependencies = []
keywords = ["monitor", "procfs", "cpu", "memory", "processes", "terminal", "linux"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
buzz = "buzzmon.tui:main"
buzz-report = "buzzmon.report:main"

[tool.hatch.build.targets.wheel]
packages = ["buzzmon"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
