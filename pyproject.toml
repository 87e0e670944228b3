[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mzkit"
version = "0.1.0"
description = "Small geometry, grid, height-map, banded Cholesky and XML utilities"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["geometry", "vectors", "matrix", "grid", "heightmap", "bresenham", "xml", "cholesky", "tokenizer"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Text Processing :: Markup :: XML",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["mzkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
