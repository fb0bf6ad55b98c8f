[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "esshell"
version = "0.9.2"
description = "Core pieces of an extensible shell: lexer, syntax trees, wildcard matching, word splitting, statuses, signals and formatting"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "es", "lexer", "glob", "pattern-matching", "syntax-tree"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["esshell"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
