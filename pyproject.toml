[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ulidkit"
version = "2.1.0"
description = "Universally Unique Lexicographically Sortable Identifiers with monotonic entropy and a command-line tool"
requires-python = ">=3.10"
dependencies = []
keywords = ["ulid", "identifier", "uuid", "sortable", "monotonic", "base32"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[project.scripts]
ulid = "ulidkit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ulidkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
