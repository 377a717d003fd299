"""
Polyhedral Geometry - lazy typed access to cones and polyhedra.

Exposes rays, facets, faces, lineality spaces and Hilbert bases of kernel-held
cones and polyhedra as lazy sequences, and converts them into dense matrices
over the rationals or the integers.

Example:
    >>> from polyhedral_geometry import positive_hull, rays, facets, nrays
    >>>
    >>> C = positive_hull([[1, 0], [0, 1], [0, 2]])
    >>> nrays(C)
    2
    >>> list(rays(C))
    [RayVector([1, 0]), RayVector([0, 1])]
"""

import logging

__version__ = "1.0.0"

# Library default: no output unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Scalar domains, errors and configuration
from .config import Settings, configure, get_settings
from .errors import (
    ArgumentError,
    IndexOutOfRange,
    InvalidHomogenization,
    KernelError,
    NotLinear,
    PolyhedralError,
    UnrecognizedScalarDomain,
    UnsupportedOperation,
)
from .logging_config import setup_logging
from .scalars import ScalarDomain

# Value types
from .models import (
    AffineHalfspace,
    AffineHyperplane,
    GeometricVector,
    Halfspace,
    Hyperplane,
    LinearHalfspace,
    LinearHyperplane,
    PointVector,
    RayVector,
)

# Backing objects and lazy sequences
from .accessors import Accessor
from .iterators import LazyPropertyIterator
from .objects import Boundedness, Cone, Polyhedron, detect_scalar_domain

# Matrix forms
from .materialize import (
    HalfspaceMatrixPair,
    affine_equation_matrix,
    affine_inequality_matrix,
    affine_matrix_for_kernel,
    as_matrix,
    generator_matrix,
    halfspace_matrix_pair,
    homogenize,
    homogenized_matrix,
    linear_equation_matrix,
    linear_inequality_matrix,
    linear_matrix_for_kernel,
    matrix_for_kernel,
    point_matrix,
    ray_indices,
    vector_matrix,
    vertex_indices,
)

# Queries
from .properties import (
    ambient_dim,
    codim,
    dim,
    f_vector,
    faces,
    facets,
    is_full_dimensional,
    is_fulldimensional,
    lineality_dim,
    lineality_space,
    nfacets,
    nrays,
    rays,
)
from .cone import (
    cone_from_inequalities,
    hilbert_basis,
    is_pointed,
    linear_span,
    positive_hull,
)
from .polyhedron import (
    affine_hull,
    convex_hull,
    is_bounded,
    is_feasible,
    nvertices,
    polyhedron_from_inequalities,
    vertices,
)

# Tropical matrices
from .tropical import is_tropically_generic, tropical_det, tropical_sign, tropical_zero

__all__ = [
    # Version
    "__version__",
    # Configuration and logging
    "Settings",
    "configure",
    "get_settings",
    "setup_logging",
    # Errors
    "PolyhedralError",
    "UnrecognizedScalarDomain",
    "IndexOutOfRange",
    "ArgumentError",
    "UnsupportedOperation",
    "NotLinear",
    "InvalidHomogenization",
    "KernelError",
    # Data classes
    "ScalarDomain",
    "GeometricVector",
    "PointVector",
    "RayVector",
    "Halfspace",
    "Hyperplane",
    "AffineHalfspace",
    "LinearHalfspace",
    "AffineHyperplane",
    "LinearHyperplane",
    "Cone",
    "Polyhedron",
    "Boundedness",
    "detect_scalar_domain",
    "Accessor",
    "LazyPropertyIterator",
    # Matrices
    "HalfspaceMatrixPair",
    "linear_inequality_matrix",
    "affine_inequality_matrix",
    "linear_equation_matrix",
    "affine_equation_matrix",
    "point_matrix",
    "vector_matrix",
    "generator_matrix",
    "ray_indices",
    "vertex_indices",
    "matrix_for_kernel",
    "linear_matrix_for_kernel",
    "affine_matrix_for_kernel",
    "halfspace_matrix_pair",
    "homogenized_matrix",
    "homogenize",
    "as_matrix",
    # Generic queries
    "rays",
    "facets",
    "faces",
    "lineality_space",
    "dim",
    "ambient_dim",
    "codim",
    "nrays",
    "nfacets",
    "lineality_dim",
    "f_vector",
    "is_fulldimensional",
    "is_full_dimensional",
    # Cones
    "positive_hull",
    "cone_from_inequalities",
    "is_pointed",
    "linear_span",
    "hilbert_basis",
    # Polyhedra
    "convex_hull",
    "polyhedron_from_inequalities",
    "vertices",
    "affine_hull",
    "nvertices",
    "is_bounded",
    "is_feasible",
    # Tropical
    "tropical_det",
    "tropical_sign",
    "is_tropically_generic",
    "tropical_zero",
]
