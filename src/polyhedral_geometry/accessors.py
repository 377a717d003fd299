"""
Accessor tags and capability tables.

Each derived property of a backing object is read through one accessor, named
by a member of the Accessor enum. The tag is the dispatch key for everything
an iterator can do: computing one element, returning a whole block in one of
several matrix shapes, reporting incidences. Each of those capabilities is a
CapabilityTable from tag to implementation; asking a table for a tag it does
not know raises UnsupportedOperation naming the capability.
"""

from collections.abc import Callable
from enum import Enum
from typing import Any

from .errors import UnsupportedOperation


class Accessor(Enum):
    RAY_CONE = "ray_cone"
    FACET_CONE = "facet_cone"
    FACE_CONE = "face_cone"
    LINEALITY_CONE = "lineality_cone"
    LINEAR_SPAN = "linear_span"
    HILBERT_GENERATOR = "hilbert_generator"
    VERTEX_POLYHEDRON = "vertex_polyhedron"
    RAY_POLYHEDRON = "ray_polyhedron"
    FACET_POLYHEDRON = "facet_polyhedron"
    FACE_POLYHEDRON = "face_polyhedron"
    LINEALITY_POLYHEDRON = "lineality_polyhedron"
    AFFINE_HULL = "affine_hull"


class CapabilityTable:
    """Lookup table from accessor tag to the implementation of one capability."""

    def __init__(self, name: str):
        self.name = name
        self._impls: dict[Accessor, Any] = {}

    def register(self, *accessors: Accessor) -> Callable:
        """Decorator registering a function for the given accessors."""
        def decorator(func):
            for accessor in accessors:
                self.add(accessor, func)
            return func
        return decorator

    def add(self, accessor: Accessor, impl: Any) -> None:
        self._impls[accessor] = impl

    def lookup(self, accessor: Accessor) -> Any:
        try:
            return self._impls[accessor]
        except KeyError:
            raise UnsupportedOperation(self.name) from None

    def __contains__(self, accessor: Accessor) -> bool:
        return accessor in self._impls

    def __call__(self, accessor: Accessor, *args, **kwargs) -> Any:
        return self.lookup(accessor)(*args, **kwargs)

    def __repr__(self) -> str:
        return f"CapabilityTable({self.name!r}, {len(self._impls)} accessors)"


# Per-element access: (element_type, scalar, obj, i, **options) -> element
ELEMENT = CapabilityTable("element access")

# Whole blocks: (obj, **options) -> matrix
LINEAR_INEQUALITY_MATRIX = CapabilityTable("Linear Inequality Matrix")
AFFINE_INEQUALITY_MATRIX = CapabilityTable("Affine Inequality Matrix")
LINEAR_EQUATION_MATRIX = CapabilityTable("Linear Equation Matrix")
AFFINE_EQUATION_MATRIX = CapabilityTable("Affine Equation Matrix")

# Generator blocks: (obj, homogenized=False, **options) -> matrix
POINT_MATRIX = CapabilityTable("Point Matrix")
VECTOR_MATRIX = CapabilityTable("Vector Matrix")
GENERATOR_MATRIX = CapabilityTable("Generator Matrix")

# Incidences: (obj, **options) -> boolean matrix
RAY_INDICES = CapabilityTable("Incidence Matrix resp. rays")
VERTEX_INDICES = CapabilityTable("Incidence Matrix resp. vertices")

# Roles: which of the tables above is the kernel form of an accessor's data
KERNEL_MATRIX = CapabilityTable("Matrix for kernel")
LINEAR_KERNEL_MATRIX = CapabilityTable("Linear Matrix for kernel")
AFFINE_KERNEL_MATRIX = CapabilityTable("Affine Matrix for kernel")
