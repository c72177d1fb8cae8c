[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lndwcc"
version = "0.1.0"
description = "A small teaching compiler for arithmetic expressions, with optimisation passes and a register-machine interpreter"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "compiler",
    "interpreter",
    "education",
    "constant-folding",
    "register-allocation",
    "optimization",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
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
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
lndwcc = "lndwcc.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["lndwcc"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B"]
