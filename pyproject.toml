[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "trainkit"
version = "0.1.0"
description = "Training-material tooling: cheatsheet generation and checking, plus simulated UART drivers and small teaching examples"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "training",
    "cheatsheet",
    "markdown",
    "uart",
    "cmsdk",
    "pl011",
    "embedded",
    "education",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Text Processing :: Markup :: Markdown",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
trainkit = "trainkit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["trainkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
