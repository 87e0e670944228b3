"""Banded-matrix helpers for trajectory smoothing.

The matrices handled here are symmetric and banded.  A band is described
by its ``coeffs`` vector, e.g. ``[-1, 2]`` (velocity) or ``[1, -4, 6]``
(acceleration): the last coefficient sits on the diagonal and the earlier
ones on successively farther off-diagonals.  Cholesky factors are kept in
"skyline" form, an ``n``-by-``len(coeffs)`` array whose last column holds
the diagonal.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike


def _coeff_vector(coeffs: ArrayLike) -> np.ndarray:
    c = np.asarray(coeffs, dtype=float).ravel()
    if c.size == 0:
        raise ValueError("coefficient vector is empty")
    return c


def _as_rows(x: ArrayLike) -> np.ndarray:
    arr = np.asarray(x, dtype=float)
    if arr.ndim == 1:
        arr = arr[:, None]
    if arr.ndim != 2:
        raise ValueError("expected a one- or two-dimensional array")
    return arr


def mydot(a: ArrayLike, b: ArrayLike) -> float:
    """Sum of the elementwise product of two arrays of the same shape."""
    a_arr = np.asarray(a, dtype=float)
    b_arr = np.asarray(b, dtype=float)
    if a_arr.shape != b_arr.shape:
        raise ValueError(f"shape mismatch: {a_arr.shape} vs {b_arr.shape}")
    return float(np.sum(a_arr * b_arr))


def diag_mul(coeffs: ArrayLike, x: ArrayLike) -> np.ndarray:
    """Multiply ``x`` on the left by the symmetric band matrix of ``coeffs``."""
    c = _coeff_vector(coeffs)
    o = c.size - 1
    x_arr = np.asarray(x, dtype=float)
    result = c[o] * x_arr
    for d in range(1, o + 1):
        if d >= x_arr.shape[0]:
            break
        result[d:] += c[o - d] * x_arr[:-d]
        result[:-d] += c[o - d] * x_arr[d:]
    return result


def skyline_chol(n: int, coeffs: ArrayLike) -> np.ndarray:
    """Cholesky factor of the ``n``-by-``n`` band matrix, in skyline form."""
    c = _coeff_vector(coeffs)
    nc = c.size
    o = nc - 1
    L = np.zeros((n, nc))
    for j in range(n):
        for i in range(j, min(j + nc, n)):
            total = sum(
                L[i, k - i + o] * L[j, k - j + o] for k in range(max(0, i - o), j)
            )
            if i == j:
                pivot = c[o] - total
                if pivot <= 0:
                    raise ValueError("band matrix is not positive definite")
                L[j, o] = math.sqrt(pivot)
            else:
                L[i, j - i + o] = (c[j - i + o] - total) / L[j, o]
    return L


def skyline_chol_solve(L: ArrayLike, x: ArrayLike) -> np.ndarray:
    """Solve ``A y = x`` given the skyline Cholesky factor of ``A``."""
    L_arr = np.asarray(L, dtype=float)
    n, nc = L_arr.shape
    o = nc - 1
    y = np.array(x, dtype=float)
    if y.shape[0] != n:
        raise ValueError(f"right-hand side has {y.shape[0]} rows, expected {n}")

    for i in range(n):
        for j in range(max(0, i - o), i):
            y[i] -= L_arr[i, j - i + o] * y[j]
        y[i] /= L_arr[i, o]

    for i in reversed(range(n)):
        for j in range(i + 1, min(i + nc, n)):
            y[i] -= L_arr[j, i - j + o] * y[j]
        y[i] /= L_arr[i, o]

    return y


def skyline_chol_solve_multi(L: ArrayLike, xx: ArrayLike) -> np.ndarray:
    """Solve each consecutive ``n``-row block of ``xx`` with the same factor."""
    L_arr = np.asarray(L, dtype=float)
    n = L_arr.shape[0]
    xx_arr = np.asarray(xx, dtype=float)
    if n == 0 or xx_arr.shape[0] % n:
        raise ValueError(
            f"row count {xx_arr.shape[0]} is not a multiple of the factor size {n}"
        )
    blocks = xx_arr.shape[0] // n
    if blocks == 0:
        return xx_arr.copy()
    return np.concatenate(
        [skyline_chol_solve(L_arr, block) for block in np.split(xx_arr, blocks)]
    )


def get_pos(x: ArrayLike, h: float) -> np.ndarray:
    """Taylor-expand a state at offset ``h``.

    Row ``i`` of ``x`` holds the ``i``-th derivative; the result is the
    position row ``sum(h**i / i! * x[i])``.
    """
    rows = _as_rows(x)
    result = rows[0].copy()
    fac = 1.0
    hn = 1.0
    for i, row in enumerate(rows[1:], start=1):
        fac *= i
        hn *= h
        result += (hn / fac) * row
    return result


def create_b_matrix(
    n: int, coeffs: ArrayLike, x0: ArrayLike, x1: ArrayLike, dt: float
) -> tuple[np.ndarray, float]:
    """Endpoint terms for a band objective over ``n`` free timesteps.

    ``x0`` and ``x1`` are the start and goal states (rows are successive
    derivatives).  Returns the ``n``-row matrix ``b`` and the constant
    ``c`` of the objective ``0.5 x'Ax + x'b + c``.
    """
    c = _coeff_vector(coeffs)
    nc = c.size
    o = nc - 1
    start = _as_rows(x0)
    goal = _as_rows(x1)
    if start.shape[1] != goal.shape[1]:
        raise ValueError("start and goal states have different widths")
    if n < o:
        raise ValueError(f"need at least {o} timesteps for this band")

    b = np.zeros((n, start.shape[1]))
    total = 0.0
    for i0 in range(o):
        i1 = n - i0 - 1
        for j in range(nc - i0 - 1):
            t0 = j - o
            b[i0] += c[j] * get_pos(start, t0 * dt)
            b[i1] += c[j] * get_pos(goal, -t0 * dt)
        total += mydot(b[i0], b[i0])
        if i0 != i1:
            total += mydot(b[i1], b[i1])
    return b, 0.5 * total