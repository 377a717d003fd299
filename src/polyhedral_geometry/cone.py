"""
Polyhedral cones.

Constructors for Cone and the cone implementations of the generic queries.
Every property is exposed through one accessor; the element function and the
bulk capabilities of each accessor are registered in the tables of
accessors.py right next to the query that uses it.
"""

import logging

import numpy as np

from . import kernel, properties
from .accessors import (
    ELEMENT,
    GENERATOR_MATRIX,
    KERNEL_MATRIX,
    LINEAR_EQUATION_MATRIX,
    LINEAR_INEQUALITY_MATRIX,
    LINEAR_KERNEL_MATRIX,
    RAY_INDICES,
    VECTOR_MATRIX,
    Accessor,
)
from .config import get_settings
from .errors import ArgumentError
from .iterators import LazyPropertyIterator
from .materialize import homogenize
from .models import (
    AffineHalfspace,
    Halfspace,
    LinearHalfspace,
    LinearHyperplane,
    PointVector,
    RayVector,
)
from .objects import Boundedness, Cone, Polyhedron
from .scalars import ScalarDomain

logger = logging.getLogger(__name__)


def resolve_scalar(scalar: ScalarDomain | str | None) -> ScalarDomain:
    """Scalar domain from an enum member, its name ("Rational") or the configured default."""
    if scalar is None:
        return get_settings().default_scalar
    try:
        return ScalarDomain(scalar)
    except ValueError as err:
        raise ArgumentError(f"unknown scalar domain {scalar!r}") from err


def _block(C: Cone, name: str) -> np.ndarray:
    return kernel.read_block(C.kernel_object, name)


def _select(block: np.ndarray, indices) -> np.ndarray:
    return block[np.asarray(list(indices), dtype=np.intp)]


def _negated(rows):
    if rows is None:
        return None
    return [[-x for x in row] for row in rows]


# =============================================================================
# Constructors
# =============================================================================

def positive_hull(rays, lineality=None, scalar=None, ambient_dim: int | None = None) -> Cone:
    """Cone generated by non-negative combinations of rays plus a linear subspace.

    Args:
        rays: Generating rays, one per row
        lineality: Basis of a subspace contained in the cone
        scalar: Scalar domain; defaults to the configured one
        ambient_dim: Required only when every input is empty

    Returns:
        Cone

    Example:
        >>> C = positive_hull([[1, 0], [0, 1], [0, 2]])
        >>> nrays(C)
        2
    """
    scalar = resolve_scalar(scalar)
    obj = kernel.construct_cone(rays, lineality, scalar=scalar, ambient_dim=ambient_dim)
    logger.debug("Built cone from %d rays", len(rays) if rays is not None else 0)
    return Cone(obj)


def cone_from_inequalities(inequalities, equations=None, scalar=None,
                           ambient_dim: int | None = None) -> Cone:
    """Cone {x : A x <= 0, E x = 0}.

    Args:
        inequalities: Rows of A
        equations: Rows of E
        scalar: Scalar domain; defaults to the configured one
        ambient_dim: Required only when every input is empty

    Returns:
        Cone
    """
    scalar = resolve_scalar(scalar)
    obj = kernel.construct_cone_from_inequalities(
        _negated(inequalities), equations, scalar=scalar, ambient_dim=ambient_dim
    )
    logger.debug("Built cone from %d inequalities",
                 len(inequalities) if inequalities is not None else 0)
    return Cone(obj)


def _sub_cone(C: Cone, ray_ids) -> Cone:
    obj = kernel.construct_cone(
        _select(_block(C, "RAYS"), ray_ids),
        _block(C, "LINEALITY_SPACE"),
        scalar=C.scalar,
        ambient_dim=kernel.read_scalar(C.kernel_object, "CONE_AMBIENT_DIM"),
    )
    return Cone(obj)


def _facet_halfspace_polyhedron(C: Cone, i: int) -> Polyhedron:
    # kernel rows [b, a] read b + a . x >= 0, so FACETS[i] gets a zero bias
    row = _block(C, "FACETS")[i - 1]
    obj = kernel.construct_polytope_from_inequalities(
        [[0, *row]], scalar=C.scalar, ambient_dim=len(row) + 1
    )
    return Polyhedron(obj, Boundedness.UNKNOWN)


# =============================================================================
# Rays
# =============================================================================

@ELEMENT.register(Accessor.RAY_CONE)
def _ray_cone(element_type, scalar, C, i):
    return element_type(_block(C, "RAYS")[i - 1], scalar)


@VECTOR_MATRIX.register(Accessor.RAY_CONE)
def _ray_cone_matrix(C, homogenized=False):
    block = _block(C, "RAYS")
    return homogenize(block, 0) if homogenized else block


KERNEL_MATRIX.add(Accessor.RAY_CONE, VECTOR_MATRIX)


@properties.rays.register(Cone)
def _rays(C):
    return LazyPropertyIterator(RayVector, C.scalar, C, Accessor.RAY_CONE, _nrays(C))


# =============================================================================
# Facets and faces
# =============================================================================

@ELEMENT.register(Accessor.FACET_CONE)
def _facet_cone(element_type, scalar, C, i):
    if issubclass(element_type, Cone):
        incidence = _block(C, "RAYS_IN_FACETS")[i - 1]
        return _sub_cone(C, np.flatnonzero(incidence))
    if issubclass(element_type, Polyhedron):
        return _facet_halfspace_polyhedron(C, i)
    normal = -_block(C, "FACETS")[i - 1]
    if issubclass(element_type, AffineHalfspace):
        return element_type(normal, 0, scalar)
    return element_type(normal, scalar)


@LINEAR_INEQUALITY_MATRIX.register(Accessor.FACET_CONE)
def _facet_cone_matrix(C):
    return -_block(C, "FACETS")


@RAY_INDICES.register(Accessor.FACET_CONE)
def _facet_cone_incidence(C):
    return _block(C, "RAYS_IN_FACETS")


LINEAR_KERNEL_MATRIX.add(Accessor.FACET_CONE, LINEAR_INEQUALITY_MATRIX)


@properties.facets.register(Cone)
def _facets(C, as_type=None):
    if as_type is None or as_type in (Halfspace, LinearHalfspace):
        element_type = LinearHalfspace
    elif as_type in (AffineHalfspace, Cone, Polyhedron):
        element_type = as_type
    else:
        name = getattr(as_type, "__name__", repr(as_type))
        raise ArgumentError(f"facets of a cone cannot be returned as {name}")
    return LazyPropertyIterator(element_type, C.scalar, C, Accessor.FACET_CONE, _nfacets(C))


@ELEMENT.register(Accessor.FACE_CONE)
def _face_cone(element_type, scalar, C, i, face_dim):
    return _sub_cone(C, kernel.faces_of_dim(C.kernel_object, face_dim)[i - 1])


@RAY_INDICES.register(Accessor.FACE_CONE)
def _face_cone_incidence(C, face_dim):
    face_list = kernel.faces_of_dim(C.kernel_object, face_dim)
    incidence = np.zeros((len(face_list), _nrays(C)), dtype=bool)
    for row, face in enumerate(face_list):
        incidence[row, list(face)] = True
    return incidence


@properties.faces.register(Cone)
def _faces(C, face_dim: int):
    if face_dim == _dim(C) - 1:
        return _facets(C, as_type=Cone)
    n = face_dim - _lineality_dim(C)
    if n < 1:
        logger.debug("Faces of dimension %d not applicable, lineality dimension is %d",
                     face_dim, _lineality_dim(C))
        return None
    count = len(kernel.faces_of_dim(C.kernel_object, n))
    return LazyPropertyIterator(Cone, C.scalar, C, Accessor.FACE_CONE, count, {"face_dim": n})


# =============================================================================
# Lineality, span and Hilbert basis
# =============================================================================

@ELEMENT.register(Accessor.LINEALITY_CONE)
def _lineality_cone(element_type, scalar, C, i):
    return element_type(_block(C, "LINEALITY_SPACE")[i - 1], scalar)


@GENERATOR_MATRIX.register(Accessor.LINEALITY_CONE)
def _lineality_cone_matrix(C, homogenized=False):
    block = _block(C, "LINEALITY_SPACE")
    return homogenize(block, 0) if homogenized else block


KERNEL_MATRIX.add(Accessor.LINEALITY_CONE, GENERATOR_MATRIX)


@properties.lineality_space.register(Cone)
def _lineality_space(C):
    return LazyPropertyIterator(
        RayVector, C.scalar, C, Accessor.LINEALITY_CONE, _lineality_dim(C)
    )


@ELEMENT.register(Accessor.LINEAR_SPAN)
def _linear_span_row(element_type, scalar, C, i):
    return element_type(_block(C, "LINEAR_SPAN")[i - 1], scalar)


@LINEAR_EQUATION_MATRIX.register(Accessor.LINEAR_SPAN)
def _linear_span_matrix(C):
    return _block(C, "LINEAR_SPAN")


LINEAR_KERNEL_MATRIX.add(Accessor.LINEAR_SPAN, LINEAR_EQUATION_MATRIX)


def linear_span(C: Cone) -> LazyPropertyIterator:
    """Equations of the linear span of C, as LinearHyperplane."""
    n = len(_block(C, "LINEAR_SPAN"))
    return LazyPropertyIterator(LinearHyperplane, C.scalar, C, Accessor.LINEAR_SPAN, n)


@ELEMENT.register(Accessor.HILBERT_GENERATOR)
def _hilbert_generator(element_type, scalar, C, i):
    return element_type(_block(C, "HILBERT_BASIS_GENERATORS")[i - 1], ScalarDomain.INTEGER)


@GENERATOR_MATRIX.register(Accessor.HILBERT_GENERATOR)
def _hilbert_generator_matrix(C, homogenized=False):
    block = _block(C, "HILBERT_BASIS_GENERATORS")
    return homogenize(block, 1) if homogenized else block


KERNEL_MATRIX.add(Accessor.HILBERT_GENERATOR, GENERATOR_MATRIX)


def hilbert_basis(C: Cone) -> LazyPropertyIterator:
    """Hilbert basis of a pointed cone, as integer PointVector.

    Raises:
        ArgumentError: If C is not pointed
    """
    if not is_pointed(C):
        raise ArgumentError("Cone not pointed.")
    n = len(_block(C, "HILBERT_BASIS_GENERATORS"))
    return LazyPropertyIterator(
        PointVector, ScalarDomain.INTEGER, C, Accessor.HILBERT_GENERATOR, n
    )


# =============================================================================
# Scalar properties
# =============================================================================

def _read(C: Cone, name: str):
    return kernel.read_scalar(C.kernel_object, name)


@properties.nrays.register(Cone)
def _nrays(C) -> int:
    return _read(C, "N_RAYS")


@properties.nfacets.register(Cone)
def _nfacets(C) -> int:
    return _read(C, "N_FACETS")


@properties.dim.register(Cone)
def _dim(C) -> int:
    return _read(C, "CONE_DIM")


@properties.ambient_dim.register(Cone)
def _ambient_dim(C) -> int:
    return _read(C, "CONE_AMBIENT_DIM")


@properties.lineality_dim.register(Cone)
def _lineality_dim(C) -> int:
    return _read(C, "LINEALITY_DIM")


@properties.is_fulldimensional.register(Cone)
def _is_fulldimensional(C) -> bool:
    return _read(C, "FULL_DIM")


def is_pointed(C: Cone) -> bool:
    """Whether C contains no line."""
    return _read(C, "POINTED")


@properties.f_vector.register(Cone)
def _f_vector(C) -> list[int]:
    counts = [int(x) for x in kernel.read_block(C.kernel_object, "F_VECTOR")]
    return [0] * _lineality_dim(C) + counts
