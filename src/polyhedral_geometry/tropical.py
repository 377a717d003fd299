"""
Tropical matrices.

Entries are ordinary numbers read in the min-plus or max-plus semiring; the
tropical zero is +inf (min) or -inf (max). The tropical determinant is the
optimal value of a linear assignment problem, solved with
scipy.optimize.linear_sum_assignment.
"""

import itertools
import logging
import math

import numpy as np
from scipy.optimize import linear_sum_assignment

from .errors import ArgumentError

logger = logging.getLogger(__name__)

CONVENTIONS = ("min", "max")


def _check_convention(convention: str) -> str:
    if convention not in CONVENTIONS:
        raise ArgumentError(f"convention must be 'min' or 'max', got {convention!r}")
    return convention


def _rows(A) -> list[list]:
    rows = [list(row) for row in A]
    if not rows or not rows[0]:
        raise ArgumentError("Empty matrix")
    if len({len(row) for row in rows}) != 1:
        raise ArgumentError("Rows of different lengths")
    return rows


def _square(A) -> list[list]:
    rows = _rows(A)
    if len(rows) != len(rows[0]):
        raise ArgumentError("Non-square matrix")
    return rows


def tropical_zero(convention: str = "min") -> float:
    """Additive identity of the tropical semiring.

    Args:
        convention: "min" or "max"

    Returns:
        inf for min-plus, -inf for max-plus

    Raises:
        ArgumentError: If the convention is unknown
    """
    return math.inf if _check_convention(convention) == "min" else -math.inf


def _permutation_value(rows: list[list], perm) -> object:
    return sum(rows[i][j] for i, j in enumerate(perm))


def tropical_det(A, convention: str = "min"):
    """Tropical determinant of a square matrix.

    This is the tropicalization of the ordinary determinant evaluated at A:
    the minimum (or maximum) over all permutations of the sum of the chosen
    entries.

    Args:
        A: Square matrix as nested sequences or numpy array
        convention: "min" or "max"

    Returns:
        The optimal assignment value, summed exactly from the entries of A,
        or the tropical zero if every permutation hits an infinite entry

    Raises:
        ArgumentError: If A is empty or not square

    Example:
        >>> tropical_det([[1, 2], [3, 4]])
        5
    """
    _check_convention(convention)
    rows = _square(A)
    cost = np.array([[float(x) for x in row] for row in rows], dtype=float)
    if convention == "max":
        cost = -cost
    try:
        row_ind, col_ind = linear_sum_assignment(cost)
    except ValueError:
        logger.debug("No finite assignment for %dx%d tropical matrix", len(rows), len(rows))
        return tropical_zero(convention)
    perm = [int(j) for _, j in sorted(zip(row_ind, col_ind))]
    return _permutation_value(rows, perm)


def _parity(perm) -> int:
    inversions = sum(
        1 for a, b in itertools.combinations(range(len(perm)), 2) if perm[a] > perm[b]
    )
    return -1 if inversions % 2 else 1


def tropical_sign(A, convention: str = "min") -> int:
    """Sign of the optimal permutations of a square matrix.

    Returns:
        +1 or -1 if all optimal permutations have that sign, 0 if optimal
        permutations of both parities exist or no permutation is finite
    """
    rows = _square(A)
    det = tropical_det(rows, convention)
    if isinstance(det, float) and math.isinf(det):
        return 0
    signs = {
        _parity(perm)
        for perm in itertools.permutations(range(len(rows)))
        if _permutation_value(rows, perm) == det
    }
    if len(signs) != 1:
        return 0
    return signs.pop()


def is_tropically_generic(A, convention: str = "min") -> bool:
    """Whether the rows of A are points in tropical general position.

    A square matrix is generic when its tropical sign is non-zero. For other
    shapes every maximal square minor, taken along the longer side, has to be
    generic. Entries equal to the tropical zero are allowed; permutations
    through them never reach the optimum.

    Raises:
        ArgumentError: If A is empty or ragged
    """
    _check_convention(convention)
    rows = _rows(A)
    nrows, ncols = len(rows), len(rows[0])
    if nrows == ncols:
        return tropical_sign(rows, convention) != 0
    if nrows < ncols:
        rows = [list(col) for col in zip(*rows)]
    size = min(nrows, ncols)
    return all(
        tropical_sign([rows[i] for i in subset], convention) != 0
        for subset in itertools.combinations(range(len(rows)), size)
    )
