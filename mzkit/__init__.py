"""Vectors, a 3x3 matrix, line rasterisation, grids, height maps, banded Cholesky helpers, a tokenizer and a small XML model."""

__version__ = "0.1.0"