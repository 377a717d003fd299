"""
Value types: points, rays, half-spaces and hyperplanes.

PointVector and RayVector are mutable coordinate containers whose role is
their class. Half-spaces and hyperplanes are frozen dataclasses; the linear
variants have no bound and report 0 through negbias.
"""

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Iterable

import numpy as np

from .scalars import ScalarDomain


def _flatten(values) -> list:
    """Flatten a vector, a 1 x n row or an iterator into a list."""
    if not isinstance(values, np.ndarray):
        values = list(values)
    return list(np.ravel(np.asarray(values, dtype=object)))


class GeometricVector:
    """Coordinate vector over one scalar domain."""

    __slots__ = ("_coords", "_scalar")
    __hash__ = None

    def __init__(
        self,
        coords: Iterable | int,
        scalar: ScalarDomain = ScalarDomain.RATIONAL,
    ):
        """Create a vector.

        Args:
            coords: Coordinate sequence, or a dimension for a zero vector
            scalar: Scalar domain of the coordinates

        Raises:
            ValueError: If a coordinate does not fit the domain
        """
        if isinstance(coords, (int, np.integer)) and not isinstance(coords, bool):
            if coords < 0:
                raise ValueError(f"dimension must be non-negative, got {coords}")
            values = [scalar.zero()] * int(coords)
        else:
            values = scalar.convert_all(_flatten(coords))
        self._coords = values
        self._scalar = scalar

    @property
    def scalar(self) -> ScalarDomain:
        return self._scalar

    def __len__(self) -> int:
        return len(self._coords)

    def __iter__(self):
        return iter(self._coords)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return list(self._coords[index])
        return self._coords[index]

    def __setitem__(self, index: int, value) -> None:
        self._coords[index] = self._scalar.convert(value)

    def __eq__(self, other) -> bool:
        if isinstance(other, GeometricVector):
            return self._coords == other._coords
        if isinstance(other, (list, tuple, np.ndarray)):
            return len(self) == len(other) and all(a == b for a, b in zip(self._coords, other))
        return NotImplemented

    def __mul__(self, k):
        if isinstance(k, (GeometricVector, list, tuple, np.ndarray)):
            return NotImplemented
        return type(self)([k * c for c in self._coords], self._scalar)

    __rmul__ = __mul__

    def __neg__(self):
        return type(self)([-c for c in self._coords], self._scalar)

    def similar(self, n: int | None = None, scalar: ScalarDomain | None = None):
        """Zero vector of the same role, optionally with another length or domain."""
        return type(self)(len(self) if n is None else n, scalar or self._scalar)

    def copy(self):
        return type(self)(list(self._coords), self._scalar)

    def __array__(self, dtype=None, copy=None):
        return np.array(self._coords, dtype=object if dtype is None else dtype)

    def __repr__(self) -> str:
        entries = ", ".join(str(c) for c in self._coords)
        return f"{type(self).__name__}([{entries}])"


class PointVector(GeometricVector):
    """A point in affine space."""

    __slots__ = ()


class RayVector(GeometricVector):
    """A direction: a ray generator or a lineality vector."""

    __slots__ = ()


def _format_linear_form(a: tuple) -> str:
    terms = []
    for i, coeff in enumerate(a, start=1):
        if coeff == 0:
            continue
        magnitude = abs(coeff)
        body = f"x{i}" if magnitude == 1 else f"{magnitude}*x{i}"
        if not terms:
            terms.append(body if coeff > 0 else f"-{body}")
        else:
            terms.append(f"+ {body}" if coeff > 0 else f"- {body}")
    return " ".join(terms) if terms else "0"


def _normal(a, scalar: ScalarDomain) -> tuple:
    values = tuple(scalar.convert_all(_flatten(a)))
    if not values:
        raise ValueError("normal vector must be non-empty")
    return values


class _LinearForm:
    """Accessors shared by half-spaces and hyperplanes."""

    kind = ""
    relation = ""

    @property
    def negbias(self) -> Fraction | int:
        return self.b

    @property
    def normal_vector(self) -> list:
        return list(self.a)

    @property
    def ambient_dim(self) -> int:
        return len(self.a)

    def __str__(self) -> str:
        return (f"The {self.kind} of R^{self.ambient_dim} described by\n"
                f"1: {_format_linear_form(self.a)} {self.relation} {self.negbias}")


def _has_bias(args: tuple, kwargs: dict) -> bool:
    if "b" in kwargs:
        return True
    return len(args) > 1 and not isinstance(args[1], ScalarDomain)


class Halfspace(_LinearForm):
    """Set {x : a . x <= b}.

    Calling Halfspace directly picks the variant by arity:
    Halfspace(a, b) is an AffineHalfspace, Halfspace(a) a LinearHalfspace.
    A ScalarDomain in second position is the domain, not a bias.
    """

    kind = "Halfspace"
    relation = "<="

    def __new__(cls, *args, **kwargs):
        if cls is Halfspace:
            cls = AffineHalfspace if _has_bias(args, kwargs) else LinearHalfspace
        return super().__new__(cls)


class Hyperplane(_LinearForm):
    """Set {x : a . x = b}.

    Hyperplane(a, b) is an AffineHyperplane, Hyperplane(a) a LinearHyperplane.
    """

    kind = "Hyperplane"
    relation = "="

    def __new__(cls, *args, **kwargs):
        if cls is Hyperplane:
            cls = AffineHyperplane if _has_bias(args, kwargs) else LinearHyperplane
        return super().__new__(cls)


@dataclass(frozen=True)
class AffineHalfspace(Halfspace):
    a: tuple
    b: Fraction | int
    scalar: ScalarDomain = field(default=ScalarDomain.RATIONAL, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "a", _normal(self.a, self.scalar))
        object.__setattr__(self, "b", self.scalar.convert(self.b))


@dataclass(frozen=True)
class LinearHalfspace(Halfspace):
    a: tuple
    scalar: ScalarDomain = field(default=ScalarDomain.RATIONAL, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "a", _normal(self.a, self.scalar))

    @property
    def negbias(self) -> Fraction | int:
        return self.scalar.zero()


@dataclass(frozen=True)
class AffineHyperplane(Hyperplane):
    a: tuple
    b: Fraction | int
    scalar: ScalarDomain = field(default=ScalarDomain.RATIONAL, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "a", _normal(self.a, self.scalar))
        object.__setattr__(self, "b", self.scalar.convert(self.b))


@dataclass(frozen=True)
class LinearHyperplane(Hyperplane):
    a: tuple
    scalar: ScalarDomain = field(default=ScalarDomain.RATIONAL, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "a", _normal(self.a, self.scalar))

    @property
    def negbias(self) -> Fraction | int:
        return self.scalar.zero()
