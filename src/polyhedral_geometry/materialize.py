"""
Dense matrix forms of lazy property iterators.

Every function here takes a LazyPropertyIterator, looks up the capability it
needs in the table for the iterator's accessor, and brings the raw kernel
block into the requested shape:

- Linear and affine forms convert into each other. A linear block becomes
  affine by prepending a zero bound column; an affine block becomes linear by
  dropping its bound column, which must be zero.
- Ray-typed results in the integer domain are reduced to primitive rows.
- Homogenized generator blocks start with 1 for points and 0 for rays.

Inequality and equation matrices are always rational.
"""

from typing import NamedTuple

import numpy as np

from . import kernel
from .accessors import (
    AFFINE_EQUATION_MATRIX,
    AFFINE_INEQUALITY_MATRIX,
    AFFINE_KERNEL_MATRIX,
    GENERATOR_MATRIX,
    KERNEL_MATRIX,
    LINEAR_EQUATION_MATRIX,
    LINEAR_INEQUALITY_MATRIX,
    LINEAR_KERNEL_MATRIX,
    POINT_MATRIX,
    RAY_INDICES,
    VECTOR_MATRIX,
    VERTEX_INDICES,
    CapabilityTable,
)
from .errors import ArgumentError, InvalidHomogenization, NotLinear, UnsupportedOperation
from .models import PointVector, RayVector
from .scalars import ScalarDomain


class HalfspaceMatrixPair(NamedTuple):
    """Inequalities A x <= b."""

    A: np.ndarray
    b: np.ndarray


def convert_matrix(matrix, scalar: ScalarDomain) -> np.ndarray:
    """Copy a 2D block into an object array of the domain's native values.

    Raises:
        ValueError: If an entry does not fit the domain
    """
    block = np.asarray(matrix, dtype=object)
    if block.ndim != 2:
        raise ValueError(f"expected a 2D block, got {block.ndim} dimensions")
    result = np.empty(block.shape, dtype=object)
    for index, value in np.ndenumerate(block):
        result[index] = scalar.convert(value)
    return result


def homogenize(matrix, value=0) -> np.ndarray:
    """Prepend a constant leading column to every row.

    Args:
        matrix: 2D block
        value: Leading coordinate, 1 for points and 0 for directions

    Returns:
        Block with one more column
    """
    block = np.asarray(matrix, dtype=object)
    column = np.empty((block.shape[0], 1), dtype=object)
    column[:, 0] = [value] * block.shape[0]
    return np.hstack([column, block])


def _dehomogenize(block: np.ndarray) -> np.ndarray:
    if any(x != 0 for x in block[:, 0]):
        raise NotLinear()
    return block[:, 1:]


def _is_ray_typed(it) -> bool:
    return isinstance(it.element_type, type) and issubclass(it.element_type, RayVector)


def _is_point_typed(it) -> bool:
    return isinstance(it.element_type, type) and issubclass(it.element_type, PointVector)


def _in_domain(it, block: np.ndarray, scalar: ScalarDomain) -> np.ndarray:
    if scalar is ScalarDomain.INTEGER and _is_ray_typed(it):
        return kernel.reduce_primitive(block)
    return convert_matrix(block, scalar)


# =============================================================================
# Inequality and equation matrices
# =============================================================================

def _linear_form(it, linear: CapabilityTable, affine: CapabilityTable) -> np.ndarray:
    if it.accessor in linear:
        block = linear(it.accessor, it.backing, **it.options)
    elif it.accessor in affine:
        block = _dehomogenize(np.asarray(affine(it.accessor, it.backing, **it.options)))
    else:
        raise UnsupportedOperation(linear.name)
    return convert_matrix(block, ScalarDomain.RATIONAL)


def _affine_form(it, affine: CapabilityTable, linear: CapabilityTable) -> np.ndarray:
    if it.accessor in affine:
        block = affine(it.accessor, it.backing, **it.options)
    elif it.accessor in linear:
        block = homogenize(linear(it.accessor, it.backing, **it.options), 0)
    else:
        raise UnsupportedOperation(affine.name)
    return convert_matrix(block, ScalarDomain.RATIONAL)


def linear_inequality_matrix(it) -> np.ndarray:
    """Rows a of the inequalities a . x <= 0."""
    return _linear_form(it, LINEAR_INEQUALITY_MATRIX, AFFINE_INEQUALITY_MATRIX)


def affine_inequality_matrix(it) -> np.ndarray:
    """Rows [-b, a] of the inequalities a . x <= b."""
    return _affine_form(it, AFFINE_INEQUALITY_MATRIX, LINEAR_INEQUALITY_MATRIX)


def linear_equation_matrix(it) -> np.ndarray:
    """Rows a of the equations a . x = 0."""
    return _linear_form(it, LINEAR_EQUATION_MATRIX, AFFINE_EQUATION_MATRIX)


def affine_equation_matrix(it) -> np.ndarray:
    """Rows [-b, a] of the equations a . x = b."""
    return _affine_form(it, AFFINE_EQUATION_MATRIX, LINEAR_EQUATION_MATRIX)


# =============================================================================
# Generator matrices
# =============================================================================

def _generators(it, table: CapabilityTable, homogenized: bool) -> np.ndarray:
    block = table(it.accessor, it.backing, homogenized=homogenized, **it.options)
    return _in_domain(it, np.asarray(block, dtype=object), it.scalar)


def point_matrix(it, homogenized: bool = False) -> np.ndarray:
    """Points of the iterator as rows, in the iterator's scalar domain."""
    return _generators(it, POINT_MATRIX, homogenized)


def vector_matrix(it, homogenized: bool = False) -> np.ndarray:
    """Directions of the iterator as rows; primitive when the domain is integer."""
    return _generators(it, VECTOR_MATRIX, homogenized)


def generator_matrix(it, homogenized: bool = False) -> np.ndarray:
    """Lineality or Hilbert basis generators of the iterator as rows.

    Args:
        it: Iterator whose accessor has a generator matrix
        homogenized: Prepend the role column (0 for lineality, 1 for Hilbert basis)

    Returns:
        Object array in the iterator's scalar domain; ray-typed integer rows
        are primitive

    Raises:
        UnsupportedOperation: If the accessor has no generator matrix
    """
    return _generators(it, GENERATOR_MATRIX, homogenized)


# =============================================================================
# Incidences
# =============================================================================

def ray_indices(it) -> np.ndarray:
    """Boolean matrix: entry (i, j) is set when element i contains ray j."""
    return np.asarray(RAY_INDICES(it.accessor, it.backing, **it.options), dtype=bool)


def vertex_indices(it) -> np.ndarray:
    """Boolean matrix: entry (i, j) is set when element i contains vertex j."""
    return np.asarray(VERTEX_INDICES(it.accessor, it.backing, **it.options), dtype=bool)


# =============================================================================
# Kernel forms
# =============================================================================

def matrix_for_kernel(it, homogenized: bool = False) -> np.ndarray:
    """Generator block in the form the kernel stores it, in the iterator's domain.

    Rows are not reduced; use as_matrix for primitive integer rays.
    """
    table = KERNEL_MATRIX.lookup(it.accessor)
    block = table(it.accessor, it.backing, homogenized=homogenized, **it.options)
    return convert_matrix(block, it.scalar)


def linear_matrix_for_kernel(it) -> np.ndarray:
    """Linear form of an inequality or equation iterator.

    Raises:
        NotLinear: If only an affine form exists and its bound column is not zero
        UnsupportedOperation: If the accessor has neither form
    """
    if it.accessor in LINEAR_KERNEL_MATRIX:
        table = LINEAR_KERNEL_MATRIX.lookup(it.accessor)
        block = table(it.accessor, it.backing, **it.options)
    elif it.accessor in AFFINE_KERNEL_MATRIX:
        table = AFFINE_KERNEL_MATRIX.lookup(it.accessor)
        block = _dehomogenize(np.asarray(table(it.accessor, it.backing, **it.options)))
    else:
        raise UnsupportedOperation(LINEAR_KERNEL_MATRIX.name)
    return convert_matrix(block, ScalarDomain.RATIONAL)


def affine_matrix_for_kernel(it) -> np.ndarray:
    """Affine form [-b, a] of an inequality or equation iterator."""
    if it.accessor in AFFINE_KERNEL_MATRIX:
        table = AFFINE_KERNEL_MATRIX.lookup(it.accessor)
        block = table(it.accessor, it.backing, **it.options)
    elif it.accessor in LINEAR_KERNEL_MATRIX:
        table = LINEAR_KERNEL_MATRIX.lookup(it.accessor)
        block = homogenize(table(it.accessor, it.backing, **it.options), 0)
    else:
        raise UnsupportedOperation(AFFINE_KERNEL_MATRIX.name)
    return convert_matrix(block, ScalarDomain.RATIONAL)


def halfspace_matrix_pair(it) -> HalfspaceMatrixPair:
    """Split an inequality iterator into (A, b) with A x <= b.

    Raises:
        UnsupportedOperation: If the iterator has no inequality form
    """
    try:
        block = affine_matrix_for_kernel(it)
    except ArgumentError as err:
        raise UnsupportedOperation("Halfspace matrix pair") from err
    return HalfspaceMatrixPair(A=block[:, 1:], b=-block[:, 0])


def homogenized_matrix(it, value=None) -> np.ndarray:
    """Generator block with the leading coordinate of the elements' role.

    Args:
        it: Iterator over PointVector or RayVector elements
        value: Leading coordinate; only 1 is accepted for points and 0 for rays

    Raises:
        InvalidHomogenization: If value does not match the role
    """
    if _is_point_typed(it):
        expected, role = 1, "PointVectors"
    elif _is_ray_typed(it):
        expected, role = 0, "RayVectors"
    else:
        raise UnsupportedOperation("Homogenized matrix")
    if value is not None and value != expected:
        raise InvalidHomogenization(
            f"{role} can only be homogenized with {expected}, convert to a matrix first."
        )
    block = KERNEL_MATRIX.lookup(it.accessor)(
        it.accessor, it.backing, homogenized=True, **it.options
    )
    return _in_domain(it, np.asarray(block, dtype=object), it.scalar)


def as_matrix(it, scalar: ScalarDomain | None = None) -> np.ndarray:
    """Generator block of a point or ray iterator over a chosen domain.

    Ray-typed iterators become primitive integer rows when scalar is INTEGER.
    Point-typed iterators can only be read as integers when they already are.

    Raises:
        UnsupportedOperation: For rational points requested as integers
    """
    scalar = scalar or it.scalar
    if scalar is ScalarDomain.INTEGER and _is_point_typed(it) and it.scalar is not ScalarDomain.INTEGER:
        raise UnsupportedOperation("Integer point matrix")
    block = KERNEL_MATRIX.lookup(it.accessor)(it.accessor, it.backing, homogenized=False, **it.options)
    return _in_domain(it, np.asarray(block, dtype=object), scalar)
