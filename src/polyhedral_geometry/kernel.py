"""
Reference geometry kernel.

Holds cones and polytopes as KernelObject handles. A handle starts out with
its input properties only (generators or inequalities); every other property
is computed the first time it is asked for and cached on the handle, the way
polymake's BigObject behaves. The wrappers never look inside a handle: they go
through the module-level capability functions at the bottom of this file.

Conventions follow polymake:

- Cone FACETS rows a describe a . x >= 0.
- Polytope data is homogenized. VERTICES rows start with 1 for points and 0
  for rays, FACETS rows [b, a] describe b + a . x >= 0. The far face is not
  listed among the facets.

All arithmetic is exact (fractions.Fraction). Facets and extreme rays are
found by enumerating supporting subsets, which is fine for the small inputs
this kernel is meant for.
"""

import itertools
import logging
import math
from collections.abc import Callable
from fractions import Fraction
from typing import Any

import numpy as np

from . import linalg
from .config import get_settings
from .errors import ArgumentError, KernelError
from .scalars import ScalarDomain

logger = logging.getLogger(__name__)

CONE = "Cone"
POLYTOPE = "Polytope"

_RULES: dict[tuple[str, str], Callable[["KernelObject"], None]] = {}


class KernelObject:
    """Kernel-resident geometric object with lazily computed properties."""

    def __init__(self, type_name: str, **properties: Any):
        family = type_name.split("<", 1)[0]
        if family not in (CONE, POLYTOPE) or not type_name.endswith(">"):
            raise KernelError(f"unknown kernel type {type_name!r}")
        self._type_name = type_name
        self._family = family
        self._properties: dict[str, Any] = dict(properties)

    @property
    def type_name(self) -> str:
        return self._type_name

    @property
    def family(self) -> str:
        return self._family

    @property
    def scalar_token(self) -> str:
        return self._type_name[len(self._family) + 1:-1]

    def has(self, name: str) -> bool:
        return name in self._properties

    def give(self, name: str) -> Any:
        """Return a property, computing and caching it on first access."""
        if name not in self._properties:
            rule = _RULES.get((self._family, name))
            if rule is None:
                raise KernelError(f"{self._type_name} has no property {name}")
            logger.debug("Computing %s for %s", name, self._type_name)
            rule(self)
        return self._properties[name]

    def store(self, **properties: Any) -> None:
        self._properties.update(properties)

    def __repr__(self) -> str:
        known = ", ".join(sorted(self._properties))
        return f"KernelObject({self._type_name}: {known})"


def _rule(family: str, *names: str):
    def decorator(func):
        for name in names:
            _RULES[(family, name)] = func
        return func
    return decorator


# =============================================================================
# Conversions
# =============================================================================

def _facets_from_generators(gens: np.ndarray, span_eqs: np.ndarray, cone_dim: int) -> np.ndarray:
    """Facet normals of the cone generated by the rows of gens.

    A facet hyperplane is spanned by cone_dim - 1 generators inside the
    linear span; every such subset with a one-dimensional normal space is
    tried and kept when all generators lie on one side.
    """
    ambient = gens.shape[1]
    found: list[list[int]] = []
    if cone_dim == 0:
        return linalg.fraction_matrix(found, ambient)
    for subset in itertools.combinations(range(len(gens)), cone_dim - 1):
        system = linalg.stack([gens[list(subset)], span_eqs], ambient)
        normals = linalg.nullspace(system)
        if len(normals) != 1:
            continue
        normal = normals[0]
        values = [linalg.dot(normal, g) for g in gens]
        if all(v == 0 for v in values):
            continue
        if all(v >= 0 for v in values):
            pass
        elif all(v <= 0 for v in values):
            normal = -normal
        else:
            continue
        key = linalg.primitive(normal)
        if key not in found:
            found.append(key)
    return linalg.fraction_matrix(found, ambient)


def _generators_from_inequalities(
    inequalities: np.ndarray,
    equations: np.ndarray,
    ambient: int,
) -> tuple[np.ndarray, np.ndarray]:
    """Extreme rays and lineality of {x : inequalities . x >= 0, equations . x = 0}."""
    lineality = linalg.row_basis(
        linalg.nullspace(linalg.stack([inequalities, equations], ambient))
    )
    base = linalg.stack([equations, lineality], ambient)
    needed = ambient - 1 - linalg.rank(base)
    rays: list[list[int]] = []
    if needed >= 0:
        for subset in itertools.combinations(range(len(inequalities)), needed):
            system = linalg.stack([inequalities[list(subset)], base], ambient)
            directions = linalg.nullspace(system)
            if len(directions) != 1:
                continue
            direction = directions[0]
            values = [linalg.dot(a, direction) for a in inequalities]
            if all(v >= 0 for v in values):
                pass
            elif all(v <= 0 for v in values):
                direction = -direction
            else:
                continue
            key = linalg.primitive(direction)
            if key not in rays:
                rays.append(key)
    return linalg.fraction_matrix(rays, ambient), lineality


def _cone_from_generators(
    rays: np.ndarray,
    lineality: np.ndarray,
    integral: bool,
) -> dict[str, Any]:
    """Canonical data of cone(rays) + span(lineality)."""
    ambient = rays.shape[1]
    gens = linalg.stack([rays, lineality, -lineality], ambient)

    span_eqs = linalg.fraction_matrix(
        [linalg.primitive(row) for row in linalg.nullspace(gens)], ambient
    )
    cone_dim = ambient - len(span_eqs)
    facets = _facets_from_generators(gens, span_eqs, cone_dim)

    lineality_space = linalg.fraction_matrix(
        [linalg.primitive(row) for row in
         linalg.nullspace(linalg.stack([facets, span_eqs], ambient))],
        ambient,
    )
    lineality_dim = len(lineality_space)
    pointed_dim = cone_dim - lineality_dim

    extreme: list[np.ndarray] = []
    seen: set[frozenset[int]] = set()
    for row in rays:
        ray = linalg.project_off(row, lineality_space)
        if linalg.is_zero(ray):
            continue
        tight = frozenset(j for j, a in enumerate(facets) if linalg.dot(a, ray) == 0)
        if linalg.rank(facets[sorted(tight)]) != pointed_dim - 1:
            continue
        if tight in seen:
            continue
        seen.add(tight)
        if integral:
            ray = np.array([Fraction(x) for x in linalg.integral(ray)], dtype=object)
        extreme.append(ray)
    ray_matrix = linalg.fraction_matrix(extreme, ambient)

    incidence = np.zeros((len(facets), len(ray_matrix)), dtype=bool)
    for j, a in enumerate(facets):
        for i, ray in enumerate(ray_matrix):
            incidence[j, i] = linalg.dot(a, ray) == 0

    return {
        "RAYS": ray_matrix,
        "FACETS": facets,
        "LINEALITY_SPACE": lineality_space,
        "LINEAR_SPAN": span_eqs,
        "RAYS_IN_FACETS": incidence,
        "N_RAYS": len(ray_matrix),
        "N_FACETS": len(facets),
        "CONE_DIM": cone_dim,
        "LINEALITY_DIM": lineality_dim,
        "POINTED": lineality_dim == 0,
        "FULL_DIM": cone_dim == ambient,
    }


def _face_sets(incidence: np.ndarray, n_rays: int) -> set[frozenset[int]]:
    """All faces as ray index sets: the full set closed under facet intersection."""
    facet_sets = [frozenset(int(i) for i in np.flatnonzero(row)) for row in incidence]
    full = frozenset(range(n_rays))
    faces = {full}
    frontier = [full]
    while frontier:
        fresh = []
        for face in frontier:
            for facet in facet_sets:
                meet = face & facet
                if meet not in faces:
                    faces.add(meet)
                    fresh.append(meet)
        frontier = fresh
    return faces


def _faces_by_rank(rays: np.ndarray, faces) -> dict[int, list[tuple[int, ...]]]:
    lattice: dict[int, list[tuple[int, ...]]] = {}
    for face in faces:
        indices = tuple(sorted(face))
        face_rank = linalg.rank(rays[list(indices)]) if indices else 0
        lattice.setdefault(face_rank, []).append(indices)
    return {k: sorted(v) for k, v in lattice.items()}


# =============================================================================
# Cone rules
# =============================================================================

@_rule(CONE, "RAYS", "FACETS", "LINEALITY_SPACE", "LINEAR_SPAN", "RAYS_IN_FACETS",
       "N_RAYS", "N_FACETS", "CONE_DIM", "LINEALITY_DIM", "POINTED", "FULL_DIM")
def _canonicalize_cone(obj: KernelObject) -> None:
    ambient = obj.give("CONE_AMBIENT_DIM")
    if obj.has("INPUT_RAYS"):
        rays = obj.give("INPUT_RAYS")
        lineality = obj.give("INPUT_LINEALITY")
    else:
        rays, lineality = _generators_from_inequalities(
            obj.give("INEQUALITIES"), obj.give("EQUATIONS"), ambient
        )
    obj.store(**_cone_from_generators(rays, lineality, obj.scalar_token == "Integer"))


@_rule(CONE, "FACE_LATTICE")
def _cone_face_lattice(obj: KernelObject) -> None:
    rays = obj.give("RAYS")
    faces = _face_sets(obj.give("RAYS_IN_FACETS"), len(rays))
    obj.store(FACE_LATTICE=_faces_by_rank(rays, faces))


@_rule(CONE, "F_VECTOR")
def _cone_f_vector(obj: KernelObject) -> None:
    lattice = obj.give("FACE_LATTICE")
    pointed_dim = obj.give("CONE_DIM") - obj.give("LINEALITY_DIM")
    counts = [len(lattice.get(k, [])) for k in range(1, pointed_dim)]
    obj.store(F_VECTOR=np.array(counts, dtype=object))


@_rule(CONE, "HILBERT_BASIS_GENERATORS")
def _cone_hilbert_basis(obj: KernelObject) -> None:
    if not obj.give("POINTED"):
        raise KernelError("Hilbert basis requires a pointed cone")
    ambient = obj.give("CONE_AMBIENT_DIM")
    rays = [linalg.primitive(r) for r in obj.give("RAYS")]
    facets = obj.give("FACETS")
    span_eqs = obj.give("LINEAR_SPAN")

    def contains(x) -> bool:
        return (all(linalg.dot(a, x) >= 0 for a in facets)
                and all(linalg.dot(e, x) == 0 for e in span_eqs))

    # Hilbert basis elements lie in the zonotope spanned by the primitive rays
    low = [sum(min(0, r[j]) for r in rays) for j in range(ambient)]
    high = [sum(max(0, r[j]) for r in rays) for j in range(ambient)]
    box_size = math.prod(h - lo + 1 for lo, h in zip(low, high, strict=True))
    limit = get_settings().hilbert_box_limit
    if box_size > limit:
        raise KernelError(
            f"Hilbert basis search box has {box_size} points, limit is {limit}"
        )

    candidates = [
        point for point in itertools.product(
            *(range(lo, h + 1) for lo, h in zip(low, high, strict=True))
        )
        if any(point) and contains(point)
    ]

    def degree(x) -> Fraction:
        return sum((linalg.dot(a, x) for a in facets), Fraction(0))

    # degree is positive and additive on a pointed cone: an element is
    # reducible iff subtracting some lower-degree basis element stays inside
    basis: list[tuple] = []
    for x in sorted(candidates, key=degree):
        if not any(contains([a - b for a, b in zip(x, h, strict=True)]) for h in basis):
            basis.append(x)
    ray_keys = [tuple(r) for r in rays]
    ordered = [r for r in ray_keys if r in basis]
    ordered += sorted(x for x in basis if x not in ray_keys)

    block = np.empty((len(ordered), ambient), dtype=object)
    for i, row in enumerate(ordered):
        for j, value in enumerate(row):
            block[i, j] = int(value)
    logger.debug("Hilbert basis with %d elements from %d candidates", len(ordered), len(candidates))
    obj.store(HILBERT_BASIS_GENERATORS=block)


# =============================================================================
# Polytope rules
# =============================================================================

@_rule(POLYTOPE, "VERTICES", "FACETS", "LINEALITY_SPACE", "AFFINE_HULL",
       "VERTICES_IN_FACETS", "FAR_FACE", "N_VERTICES", "N_FACETS", "CONE_DIM",
       "LINEALITY_DIM", "POINTED", "FULL_DIM", "BOUNDED", "FEASIBLE")
def _canonicalize_polytope(obj: KernelObject) -> None:
    ambient = obj.give("CONE_AMBIENT_DIM")
    if obj.has("POINTS"):
        rays = obj.give("POINTS")
        lineality = obj.give("INPUT_LINEALITY")
    else:
        far_halfspace = linalg.fraction_matrix([[1] + [0] * (ambient - 1)], ambient)
        inequalities = linalg.stack([obj.give("INEQUALITIES"), far_halfspace], ambient)
        rays, lineality = _generators_from_inequalities(
            inequalities, obj.give("EQUATIONS"), ambient
        )
    cone = _cone_from_generators(rays, lineality, integral=False)

    cone_rays = cone["RAYS"]
    if not any(r[0] > 0 for r in cone_rays):
        empty = np.empty((0, ambient), dtype=object)
        obj.store(
            VERTICES=empty, FACETS=empty.copy(), LINEALITY_SPACE=empty.copy(),
            AFFINE_HULL=empty.copy(), VERTICES_IN_FACETS=np.zeros((0, 0), dtype=bool),
            FAR_FACE=(), N_VERTICES=0, N_FACETS=0, CONE_DIM=0, LINEALITY_DIM=0,
            POINTED=True, FULL_DIM=False, BOUNDED=True, FEASIBLE=False,
        )
        return

    integral = obj.scalar_token == "Integer"
    vertices = []
    far = []
    for i, r in enumerate(cone_rays):
        if r[0] > 0:
            vertices.append(r / r[0])
        else:
            far.append(i)
            vertices.append(np.array(linalg.integral(r), dtype=object) if integral else r)
    vertex_matrix = linalg.fraction_matrix(vertices, ambient)

    far_set = set(far)
    incidence = cone["RAYS_IN_FACETS"]
    keep = [j for j, row in enumerate(incidence)
            if not set(int(i) for i in np.flatnonzero(row)) <= far_set]

    obj.store(
        VERTICES=vertex_matrix,
        FACETS=cone["FACETS"][keep],
        LINEALITY_SPACE=cone["LINEALITY_SPACE"],
        AFFINE_HULL=cone["LINEAR_SPAN"],
        VERTICES_IN_FACETS=incidence[keep],
        FAR_FACE=tuple(far),
        N_VERTICES=len(vertex_matrix),
        N_FACETS=len(keep),
        CONE_DIM=cone["CONE_DIM"],
        LINEALITY_DIM=cone["LINEALITY_DIM"],
        POINTED=cone["POINTED"],
        FULL_DIM=cone["FULL_DIM"],
        BOUNDED=not far and cone["LINEALITY_DIM"] == 0,
        FEASIBLE=True,
    )


@_rule(POLYTOPE, "FACE_LATTICE")
def _polytope_face_lattice(obj: KernelObject) -> None:
    vertices = obj.give("VERTICES")
    far = set(obj.give("FAR_FACE"))
    faces = _face_sets(obj.give("VERTICES_IN_FACETS"), len(vertices))
    bounded_side = [face for face in faces if not face <= far]
    by_rank = _faces_by_rank(vertices, bounded_side)
    # index by polyhedron dimension, one less than the homogenized rank
    obj.store(FACE_LATTICE={k - 1: v for k, v in by_rank.items()})


@_rule(POLYTOPE, "F_VECTOR")
def _polytope_f_vector(obj: KernelObject) -> None:
    lattice = obj.give("FACE_LATTICE")
    pointed_dim = obj.give("CONE_DIM") - obj.give("LINEALITY_DIM")
    counts = [len(lattice.get(k, [])) for k in range(0, pointed_dim - 1)]
    obj.store(F_VECTOR=np.array(counts, dtype=object))


# =============================================================================
# Capability interface
# =============================================================================

def type_name(obj: KernelObject) -> str:
    """Kernel type of a handle, e.g. "Cone<Rational>" or "Polytope<Integer>"."""
    return obj.type_name


def read_scalar(obj: KernelObject, name: str) -> int | bool:
    """Read a count or flag, computing it on first access.

    Args:
        obj: Kernel handle
        name: Property name such as N_RAYS, CONE_DIM or POINTED

    Returns:
        The cached int or bool

    Raises:
        KernelError: If the property is unknown or is a block
    """
    value = obj.give(name)
    if not isinstance(value, (bool, int)):
        raise KernelError(f"{name} is not a scalar property")
    return value


def read_block(obj: KernelObject, name: str) -> np.ndarray:
    """Return a copy of a block property so callers cannot alter the cache."""
    value = obj.give(name)
    if not isinstance(value, np.ndarray):
        raise KernelError(f"{name} is not a block property")
    return value.copy()


def faces_of_dim(obj: KernelObject, k: int) -> list[tuple[int, ...]]:
    """Faces of dimension k of the pointed part, as 0-based ray/vertex index tuples."""
    return list(obj.give("FACE_LATTICE").get(k, []))


def reduce_primitive(matrix) -> np.ndarray:
    """Divide every row by the gcd of its entries, clearing denominators first."""
    rows = [linalg.primitive(row) for row in matrix]
    ncols = np.shape(matrix)[1] if np.ndim(matrix) == 2 else 0
    block = np.empty((len(rows), ncols), dtype=object)
    for i, row in enumerate(rows):
        for j, value in enumerate(row):
            block[i, j] = value
    return block


def _input_matrix(rows, scalar: ScalarDomain, ambient: int | None, label: str) -> np.ndarray:
    if rows is None:
        if ambient is None:
            raise KernelError(f"cannot infer ambient dimension without {label}")
        return np.empty((0, ambient), dtype=object)
    try:
        converted = [[Fraction(scalar.convert(x)) for x in row] for row in rows]
        return linalg.fraction_matrix(converted, ambient)
    except ValueError as err:
        raise ArgumentError(f"invalid {label}: {err}") from err


def _ambient_of(*blocks, ambient: int | None = None) -> int:
    for block in blocks:
        if isinstance(block, np.ndarray) and block.ndim == 2:
            return block.shape[1]
        if block is not None and len(block):
            return len(block[0])
    if ambient is None:
        raise KernelError("cannot infer ambient dimension from empty input")
    return ambient


def construct_cone(
    rays,
    lineality=None,
    scalar: ScalarDomain = ScalarDomain.RATIONAL,
    ambient_dim: int | None = None,
) -> KernelObject:
    """Cone generated by rays plus a lineality space.

    Args:
        rays: Generators, one per row
        lineality: Optional basis of the lineality space
        scalar: Domain the input is converted to
        ambient_dim: Needed only when every input is empty

    Returns:
        Handle of type "Cone<...>"

    Raises:
        KernelError: If the ambient dimension cannot be inferred
        ArgumentError: If an entry does not fit the domain
    """
    ambient = _ambient_of(rays, lineality, ambient=ambient_dim)
    return KernelObject(
        f"{CONE}<{scalar.value}>",
        INPUT_RAYS=_input_matrix(rays if rays is not None else [], scalar, ambient, "rays"),
        INPUT_LINEALITY=_input_matrix(lineality, scalar, ambient, "lineality"),
        CONE_AMBIENT_DIM=ambient,
    )


def construct_cone_from_inequalities(
    inequalities,
    equations=None,
    scalar: ScalarDomain = ScalarDomain.RATIONAL,
    ambient_dim: int | None = None,
) -> KernelObject:
    """Cone {x : A x >= 0, E x = 0} from rows of A and E.

    Args:
        inequalities: Rows a meaning a . x >= 0
        equations: Rows e meaning e . x = 0
        scalar: Domain the input is converted to
        ambient_dim: Needed only when every input is empty

    Returns:
        Handle of type "Cone<...>"
    """
    ambient = _ambient_of(inequalities, equations, ambient=ambient_dim)
    return KernelObject(
        f"{CONE}<{scalar.value}>",
        INEQUALITIES=_input_matrix(
            inequalities if inequalities is not None else [], scalar, ambient, "inequalities"
        ),
        EQUATIONS=_input_matrix(equations, scalar, ambient, "equations"),
        CONE_AMBIENT_DIM=ambient,
    )


def construct_polytope(
    points,
    lineality=None,
    scalar: ScalarDomain = ScalarDomain.RATIONAL,
    ambient_dim: int | None = None,
) -> KernelObject:
    """Polytope from homogenized generators (leading 1 for points, 0 for rays)."""
    ambient = _ambient_of(points, lineality, ambient=ambient_dim)
    return KernelObject(
        f"{POLYTOPE}<{scalar.value}>",
        POINTS=_input_matrix(points if points is not None else [], scalar, ambient, "points"),
        INPUT_LINEALITY=_input_matrix(lineality, scalar, ambient, "lineality"),
        CONE_AMBIENT_DIM=ambient,
    )


def construct_polytope_from_inequalities(
    inequalities,
    equations=None,
    scalar: ScalarDomain = ScalarDomain.RATIONAL,
    ambient_dim: int | None = None,
) -> KernelObject:
    """Polytope from rows [b, a] meaning b + a . x >= 0 (equations: = 0)."""
    ambient = _ambient_of(inequalities, equations, ambient=ambient_dim)
    return KernelObject(
        f"{POLYTOPE}<{scalar.value}>",
        INEQUALITIES=_input_matrix(
            inequalities if inequalities is not None else [], scalar, ambient, "inequalities"
        ),
        EQUATIONS=_input_matrix(equations, scalar, ambient, "equations"),
        CONE_AMBIENT_DIM=ambient,
    )
