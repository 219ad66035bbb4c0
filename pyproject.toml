[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jcontainers"
version = "0.1.0"
description = "JSON serialization of nested containers with form-keyed and integer-keyed maps and shared references"
requires-python = ">=3.10"
dependencies = []
keywords = ["json", "serialization", "containers", "references"]
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
    "Topic :: File Formats :: JSON",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["jcontainers"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
