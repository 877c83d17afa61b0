[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "boba"
version = "0.1.0"
description = "Lexer, parser, type checker and tree-walking interpreter for the Boba programming language"
requires-python = ">=3.10"
dependencies = []
keywords = ["boba", "interpreter", "programming-language", "lexer", "parser", "type-checker"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
boba = "boba.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["boba"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
