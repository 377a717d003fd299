"""
Generic query functions.

Each query is a functools.singledispatch function; cone.py and polyhedron.py
register the implementations for Cone and Polyhedron. Calling a query on any
other type raises ArgumentError.
"""

from functools import singledispatch

from .errors import ArgumentError


def _not_defined(name: str, obj) -> ArgumentError:
    return ArgumentError(f"{name} not defined for {type(obj).__name__}")


@singledispatch
def rays(obj):
    """Lazy sequence of the extreme rays, as RayVector."""
    raise _not_defined("rays", obj)


@singledispatch
def facets(obj, as_type=None):
    """Lazy sequence of the facets, as half-spaces or as sub-objects."""
    raise _not_defined("facets", obj)


@singledispatch
def faces(obj, face_dim: int):
    """Lazy sequence of the faces of dimension face_dim, or None if not applicable."""
    raise _not_defined("faces", obj)


@singledispatch
def lineality_space(obj):
    """Lazy sequence of a basis of the lineality space, as RayVector."""
    raise _not_defined("lineality_space", obj)


@singledispatch
def dim(obj) -> int:
    raise _not_defined("dim", obj)


@singledispatch
def ambient_dim(obj) -> int:
    raise _not_defined("ambient_dim", obj)


def codim(obj) -> int:
    """Ambient dimension minus dimension."""
    return ambient_dim(obj) - dim(obj)


@singledispatch
def nrays(obj) -> int:
    raise _not_defined("nrays", obj)


@singledispatch
def nfacets(obj) -> int:
    raise _not_defined("nfacets", obj)


@singledispatch
def lineality_dim(obj) -> int:
    raise _not_defined("lineality_dim", obj)


@singledispatch
def f_vector(obj) -> list[int]:
    """Face counts by dimension, with lineality_dim leading zeros."""
    raise _not_defined("f_vector", obj)


@singledispatch
def is_fulldimensional(obj) -> bool:
    raise _not_defined("is_fulldimensional", obj)


is_full_dimensional = is_fulldimensional
