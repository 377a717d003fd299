"""
Polyhedra.

The kernel stores a polyhedron as the cone over it: generators get a leading
coordinate, 1 for vertices and 0 for rays, and facet rows [b, a] stand for
b + a . x >= 0. Queries here strip or keep that leading coordinate as the
caller asks for.
"""

import logging

import numpy as np

from . import kernel, properties
from .accessors import (
    AFFINE_EQUATION_MATRIX,
    AFFINE_INEQUALITY_MATRIX,
    AFFINE_KERNEL_MATRIX,
    ELEMENT,
    GENERATOR_MATRIX,
    KERNEL_MATRIX,
    POINT_MATRIX,
    RAY_INDICES,
    VECTOR_MATRIX,
    VERTEX_INDICES,
    Accessor,
)
from .cone import resolve_scalar
from .errors import ArgumentError
from .iterators import LazyPropertyIterator
from .models import AffineHalfspace, AffineHyperplane, Halfspace, PointVector, RayVector
from .objects import Boundedness, Polyhedron

logger = logging.getLogger(__name__)


def _block(P: Polyhedron, name: str) -> np.ndarray:
    return kernel.read_block(P.kernel_object, name)


def _read(P: Polyhedron, name: str):
    return kernel.read_scalar(P.kernel_object, name)


def _select(block: np.ndarray, indices) -> np.ndarray:
    return block[np.asarray(list(indices), dtype=np.intp)]


def _vertex_rows(P: Polyhedron) -> list[int]:
    return [i for i, row in enumerate(_block(P, "VERTICES")) if row[0] != 0]


def _ray_rows(P: Polyhedron) -> list[int]:
    return [i for i, row in enumerate(_block(P, "VERTICES")) if row[0] == 0]


def _width(*blocks) -> int | None:
    for block in blocks:
        if block is None:
            continue
        if isinstance(block, np.ndarray) and block.ndim == 2:
            return block.shape[1]
        if len(block):
            return len(block[0])
    return None


def _is_nonzero(rows) -> bool:
    return rows is not None and any(x != 0 for row in rows for x in row)


# =============================================================================
# Constructors
# =============================================================================

def convex_hull(points, rays=None, lineality=None, scalar=None) -> Polyhedron:
    """Convex hull of points plus the cone over rays plus a linear subspace.

    Args:
        points: Points, one per row
        rays: Directions of unboundedness
        lineality: Basis of a subspace contained in the polyhedron
        scalar: Scalar domain; defaults to the configured one

    Returns:
        Polyhedron, tagged bounded when no non-zero ray or lineality is given

    Example:
        >>> P = convex_hull([[0, 0], [1, 0], [0, 1], [1, 1]])
        >>> nvertices(P), nfacets(P)
        (4, 4)
    """
    scalar = resolve_scalar(scalar)
    width = _width(points, rays, lineality)
    if width is None:
        raise ArgumentError("convex hull needs at least one non-empty input")
    generators = [[1, *p] for p in points] + [[0, *r] for r in (rays if rays is not None else [])]
    homogenized_lineality = None
    if lineality is not None:
        homogenized_lineality = [[0, *v] for v in lineality]
    obj = kernel.construct_polytope(
        generators, homogenized_lineality, scalar=scalar, ambient_dim=width + 1
    )
    if _is_nonzero(rays) or _is_nonzero(lineality):
        boundedness = Boundedness.UNBOUNDED
    else:
        boundedness = Boundedness.BOUNDED
    logger.debug("Built polyhedron from %d generators", len(generators))
    return Polyhedron(obj, boundedness)


def polyhedron_from_inequalities(A, b, equations=None, scalar=None) -> Polyhedron:
    """Polyhedron {x : A x <= b, E x = f}.

    Args:
        A: Inequality normals, one per row
        b: Right hand sides, one per row of A
        equations: Optional pair (E, f)
        scalar: Scalar domain; defaults to the configured one

    Returns:
        Polyhedron with unknown boundedness

    Raises:
        ArgumentError: If row counts do not match
    """
    scalar = resolve_scalar(scalar)
    if len(A) != len(b):
        raise ArgumentError(f"{len(A)} inequality rows but {len(b)} right hand sides")
    rows = [[bound, *(-x for x in row)] for row, bound in zip(A, b)]
    equation_rows = None
    width = _width(A)
    if equations is not None:
        E, f = equations
        if len(E) != len(f):
            raise ArgumentError(f"{len(E)} equation rows but {len(f)} right hand sides")
        equation_rows = [[bound, *(-x for x in row)] for row, bound in zip(E, f)]
        width = width if width is not None else _width(E)
    if width is None:
        raise ArgumentError("cannot infer ambient dimension from empty input")
    obj = kernel.construct_polytope_from_inequalities(
        rows, equation_rows, scalar=scalar, ambient_dim=width + 1
    )
    logger.debug("Built polyhedron from %d inequalities", len(rows))
    return Polyhedron(obj, Boundedness.UNKNOWN)


def _sub_polyhedron(P: Polyhedron, generator_ids) -> Polyhedron:
    obj = kernel.construct_polytope(
        _select(_block(P, "VERTICES"), generator_ids),
        _block(P, "LINEALITY_SPACE"),
        scalar=P.scalar,
        ambient_dim=_read(P, "CONE_AMBIENT_DIM"),
    )
    if P.boundedness is Boundedness.BOUNDED:
        return Polyhedron(obj, Boundedness.BOUNDED)
    return Polyhedron(obj)


def _incidence_columns(incidence: np.ndarray, columns: list[int]) -> np.ndarray:
    return incidence[:, np.asarray(columns, dtype=np.intp)]


# =============================================================================
# Vertices, rays and lineality
# =============================================================================

@ELEMENT.register(Accessor.VERTEX_POLYHEDRON)
def _vertex_polyhedron(element_type, scalar, P, i):
    row = _block(P, "VERTICES")[_vertex_rows(P)[i - 1]]
    return element_type(row[1:], scalar)


@POINT_MATRIX.register(Accessor.VERTEX_POLYHEDRON)
def _vertex_matrix(P, homogenized=False):
    block = _select(_block(P, "VERTICES"), _vertex_rows(P))
    return block if homogenized else block[:, 1:]


KERNEL_MATRIX.add(Accessor.VERTEX_POLYHEDRON, POINT_MATRIX)


def vertices(P: Polyhedron) -> LazyPropertyIterator:
    """Vertices of P, as PointVector."""
    return LazyPropertyIterator(
        PointVector, P.scalar, P, Accessor.VERTEX_POLYHEDRON, nvertices(P)
    )


@ELEMENT.register(Accessor.RAY_POLYHEDRON)
def _ray_polyhedron(element_type, scalar, P, i):
    row = _block(P, "VERTICES")[_ray_rows(P)[i - 1]]
    return element_type(row[1:], scalar)


@VECTOR_MATRIX.register(Accessor.RAY_POLYHEDRON)
def _ray_polyhedron_matrix(P, homogenized=False):
    block = _select(_block(P, "VERTICES"), _ray_rows(P))
    return block if homogenized else block[:, 1:]


KERNEL_MATRIX.add(Accessor.RAY_POLYHEDRON, VECTOR_MATRIX)


@properties.rays.register(Polyhedron)
def _rays(P):
    return LazyPropertyIterator(RayVector, P.scalar, P, Accessor.RAY_POLYHEDRON, _nrays(P))


@ELEMENT.register(Accessor.LINEALITY_POLYHEDRON)
def _lineality_polyhedron(element_type, scalar, P, i):
    return element_type(_block(P, "LINEALITY_SPACE")[i - 1][1:], scalar)


@GENERATOR_MATRIX.register(Accessor.LINEALITY_POLYHEDRON)
def _lineality_polyhedron_matrix(P, homogenized=False):
    block = _block(P, "LINEALITY_SPACE")
    return block if homogenized else block[:, 1:]


KERNEL_MATRIX.add(Accessor.LINEALITY_POLYHEDRON, GENERATOR_MATRIX)


@properties.lineality_space.register(Polyhedron)
def _lineality_space(P):
    return LazyPropertyIterator(
        RayVector, P.scalar, P, Accessor.LINEALITY_POLYHEDRON, _lineality_dim(P)
    )


# =============================================================================
# Facets, faces and affine hull
# =============================================================================

@ELEMENT.register(Accessor.FACET_POLYHEDRON)
def _facet_polyhedron(element_type, scalar, P, i):
    if issubclass(element_type, Polyhedron):
        incidence = _block(P, "VERTICES_IN_FACETS")[i - 1]
        return _sub_polyhedron(P, np.flatnonzero(incidence))
    row = _block(P, "FACETS")[i - 1]
    return element_type(-row[1:], row[0], scalar)


@AFFINE_INEQUALITY_MATRIX.register(Accessor.FACET_POLYHEDRON)
def _facet_polyhedron_matrix(P):
    return -_block(P, "FACETS")


@VERTEX_INDICES.register(Accessor.FACET_POLYHEDRON)
def _facet_vertex_incidence(P):
    return _incidence_columns(_block(P, "VERTICES_IN_FACETS"), _vertex_rows(P))


@RAY_INDICES.register(Accessor.FACET_POLYHEDRON)
def _facet_ray_incidence(P):
    return _incidence_columns(_block(P, "VERTICES_IN_FACETS"), _ray_rows(P))


AFFINE_KERNEL_MATRIX.add(Accessor.FACET_POLYHEDRON, AFFINE_INEQUALITY_MATRIX)


@properties.facets.register(Polyhedron)
def _facets(P, as_type=None):
    if as_type is None or as_type in (Halfspace, AffineHalfspace):
        element_type = AffineHalfspace
    elif as_type is Polyhedron:
        element_type = Polyhedron
    else:
        name = getattr(as_type, "__name__", repr(as_type))
        raise ArgumentError(f"facets of a polyhedron cannot be returned as {name}")
    return LazyPropertyIterator(
        element_type, P.scalar, P, Accessor.FACET_POLYHEDRON, _nfacets(P)
    )


@ELEMENT.register(Accessor.FACE_POLYHEDRON)
def _face_polyhedron(element_type, scalar, P, i, face_dim):
    return _sub_polyhedron(P, kernel.faces_of_dim(P.kernel_object, face_dim)[i - 1])


def _face_incidence(P: Polyhedron, face_dim: int) -> np.ndarray:
    face_list = kernel.faces_of_dim(P.kernel_object, face_dim)
    incidence = np.zeros((len(face_list), len(_block(P, "VERTICES"))), dtype=bool)
    for row, face in enumerate(face_list):
        incidence[row, list(face)] = True
    return incidence


@VERTEX_INDICES.register(Accessor.FACE_POLYHEDRON)
def _face_vertex_incidence(P, face_dim):
    return _incidence_columns(_face_incidence(P, face_dim), _vertex_rows(P))


@RAY_INDICES.register(Accessor.FACE_POLYHEDRON)
def _face_ray_incidence(P, face_dim):
    return _incidence_columns(_face_incidence(P, face_dim), _ray_rows(P))


@properties.faces.register(Polyhedron)
def _faces(P, face_dim: int):
    if face_dim == _dim(P) - 1:
        return _facets(P, as_type=Polyhedron)
    n = face_dim - _lineality_dim(P)
    if n < 0:
        logger.debug("Faces of dimension %d not applicable, lineality dimension is %d",
                     face_dim, _lineality_dim(P))
        return None
    count = len(kernel.faces_of_dim(P.kernel_object, n))
    return LazyPropertyIterator(
        Polyhedron, P.scalar, P, Accessor.FACE_POLYHEDRON, count, {"face_dim": n}
    )


@ELEMENT.register(Accessor.AFFINE_HULL)
def _affine_hull_row(element_type, scalar, P, i):
    row = _block(P, "AFFINE_HULL")[i - 1]
    return element_type(-row[1:], row[0], scalar)


@AFFINE_EQUATION_MATRIX.register(Accessor.AFFINE_HULL)
def _affine_hull_matrix(P):
    return -_block(P, "AFFINE_HULL")


AFFINE_KERNEL_MATRIX.add(Accessor.AFFINE_HULL, AFFINE_EQUATION_MATRIX)


def affine_hull(P: Polyhedron) -> LazyPropertyIterator:
    """Equations of the affine hull of P, as AffineHyperplane."""
    n = len(_block(P, "AFFINE_HULL"))
    return LazyPropertyIterator(AffineHyperplane, P.scalar, P, Accessor.AFFINE_HULL, n)


# =============================================================================
# Scalar properties
# =============================================================================

def nvertices(P: Polyhedron) -> int:
    """Number of vertices of P.

    Args:
        P: Polyhedron

    Returns:
        Count of generator rows with a non-zero leading coordinate, 0 when
        P is empty
    """
    return len(_vertex_rows(P))


@properties.nrays.register(Polyhedron)
def _nrays(P) -> int:
    return len(_ray_rows(P))


@properties.nfacets.register(Polyhedron)
def _nfacets(P) -> int:
    return _read(P, "N_FACETS")


@properties.dim.register(Polyhedron)
def _dim(P) -> int:
    return _read(P, "CONE_DIM") - 1


@properties.ambient_dim.register(Polyhedron)
def _ambient_dim(P) -> int:
    return _read(P, "CONE_AMBIENT_DIM") - 1


@properties.lineality_dim.register(Polyhedron)
def _lineality_dim(P) -> int:
    return _read(P, "LINEALITY_DIM")


@properties.is_fulldimensional.register(Polyhedron)
def _is_fulldimensional(P) -> bool:
    return _read(P, "FULL_DIM")


def is_bounded(P: Polyhedron) -> bool:
    """Whether the kernel finds P bounded. P.boundedness is left as constructed."""
    return _read(P, "BOUNDED")


def is_feasible(P: Polyhedron) -> bool:
    """Whether P has at least one point.

    Args:
        P: Polyhedron

    Returns:
        The kernel's FEASIBLE flag
    """
    return _read(P, "FEASIBLE")


@properties.f_vector.register(Polyhedron)
def _f_vector(P) -> list[int]:
    counts = [int(x) for x in _block(P, "F_VECTOR")]
    return [0] * _lineality_dim(P) + counts
