"""
Exact linear algebra over the rationals.

Matrices are numpy arrays with dtype=object holding fractions.Fraction, so
row operations stay exact. Only what the reference kernel needs is here:
reduced row echelon form, rank, null space, orthogonal projection and
primitive integer scaling.
"""

import math
from fractions import Fraction

import numpy as np


def fraction_matrix(rows, ncols: int | None = None) -> np.ndarray:
    """Convert a 2D array-like into an object array of Fractions.

    Args:
        rows: Sequence of rows (or an existing array)
        ncols: Column count, required to shape an empty input

    Returns:
        Array of shape (n, ncols) with Fraction entries
    """
    data = [[Fraction(x) for x in row] for row in rows]
    if not data:
        if ncols is None:
            raise ValueError("column count required for an empty matrix")
        return np.empty((0, ncols), dtype=object)
    widths = {len(row) for row in data}
    if len(widths) != 1:
        raise ValueError("rows must all have the same length")
    width = widths.pop()
    if ncols is not None and width != ncols:
        raise ValueError(f"expected {ncols} columns, got {width}")
    matrix = np.empty((len(data), width), dtype=object)
    for i, row in enumerate(data):
        for j, value in enumerate(row):
            matrix[i, j] = value
    return matrix


def stack(blocks: list[np.ndarray], ncols: int) -> np.ndarray:
    non_empty = [b for b in blocks if len(b)]
    if not non_empty:
        return np.empty((0, ncols), dtype=object)
    return np.vstack(non_empty)


def rref(matrix: np.ndarray) -> tuple[np.ndarray, list[int]]:
    """Reduced row echelon form.

    Args:
        matrix: Object array of Fractions

    Returns:
        Tuple of (reduced matrix, pivot column indices)
    """
    m = matrix.copy()
    nrows, ncols = m.shape
    pivots: list[int] = []
    r = 0
    for c in range(ncols):
        if r == nrows:
            break
        pivot = next((i for i in range(r, nrows) if m[i, c] != 0), None)
        if pivot is None:
            continue
        if pivot != r:
            m[[r, pivot]] = m[[pivot, r]]
        m[r] = m[r] / m[r, c]
        for i in range(nrows):
            if i != r and m[i, c] != 0:
                m[i] = m[i] - m[i, c] * m[r]
        pivots.append(c)
        r += 1
    return m, pivots


def rank(matrix: np.ndarray) -> int:
    if matrix.shape[0] == 0:
        return 0
    return len(rref(matrix)[1])


def nullspace(matrix: np.ndarray) -> np.ndarray:
    """Basis of {x : matrix @ x = 0}, one basis vector per row."""
    ncols = matrix.shape[1]
    if matrix.shape[0] == 0:
        return fraction_matrix(np.eye(ncols, dtype=int).tolist(), ncols)
    reduced, pivots = rref(matrix)
    free = [c for c in range(ncols) if c not in pivots]
    basis = []
    for f in free:
        v = [Fraction(0)] * ncols
        v[f] = Fraction(1)
        for k, p in enumerate(pivots):
            v[p] = -reduced[k, f]
        basis.append(v)
    return fraction_matrix(basis, ncols)


def row_basis(matrix: np.ndarray) -> np.ndarray:
    """Basis of the row space as the non-zero rows of the rref."""
    if matrix.shape[0] == 0:
        return matrix.copy()
    reduced, pivots = rref(matrix)
    return reduced[: len(pivots)]


def dot(u, v) -> Fraction:
    return sum((a * b for a, b in zip(u, v, strict=True)), Fraction(0))


def project_off(vector: np.ndarray, basis: np.ndarray) -> np.ndarray:
    """Remove the component of vector lying in the span of the basis rows.

    Args:
        vector: 1D object array
        basis: Linearly independent rows

    Returns:
        The orthogonal projection of vector onto the complement of span(basis)
    """
    if basis.shape[0] == 0:
        return vector.copy()
    gram = basis.dot(basis.T)
    rhs = basis.dot(vector)
    augmented = np.hstack([gram, rhs.reshape(-1, 1)])
    reduced, _ = rref(augmented)
    coefficients = reduced[:, -1]
    return vector - basis.T.dot(coefficients)


def is_zero(vector) -> bool:
    return all(x == 0 for x in vector)


def primitive(vector) -> list[int]:
    """Scale a rational vector to coprime integers, keeping its direction.

    The zero vector stays zero.
    """
    values = [Fraction(x) for x in vector]
    denominator = math.lcm(*(v.denominator for v in values)) if values else 1
    integers = [int(v * denominator) for v in values]
    divisor = math.gcd(*integers)
    if divisor == 0:
        return integers
    return [x // divisor for x in integers]


def integral(vector) -> list[int]:
    """Smallest positive multiple of a rational vector with integer entries."""
    values = [Fraction(x) for x in vector]
    denominator = math.lcm(*(v.denominator for v in values)) if values else 1
    return [int(v * denominator) for v in values]
