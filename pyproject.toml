[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "smplc"
version = "0.1.0"
description = "A compiler for the small Smpl language that emits C and builds it with gcc"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "language", "c", "codegen", "lexer", "parser"]
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
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
smplc = "smplc.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["smplc"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
