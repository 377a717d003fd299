"""
Lazy sequences over derived properties of a backing object.

A LazyPropertyIterator is a fixed-length view: it remembers which object,
which accessor and which options to use, and asks the kernel for element i
only when element i is requested. Nothing is cached here; the kernel caches
its own properties, so repeated reads cost a lookup but no recomputation.
"""

from collections.abc import Sequence
from types import MappingProxyType
from typing import Any, Mapping

import numpy as np

from . import materialize as mat
from .accessors import ELEMENT, Accessor
from .errors import IndexOutOfRange
from .models import (
    AffineHalfspace,
    AffineHyperplane,
    PointVector,
    RayVector,
)
from .objects import Polyhedron
from .scalars import ScalarDomain


class LazyPropertyIterator(Sequence):
    """Random-access sequence of n elements produced by one accessor.

    Positions are 1-based through at(); the Python sequence protocol
    (indexing, slicing, iteration) is 0-based and built on top of it.

    Example:
        >>> it = rays(positive_hull([[1, 0], [0, 1]]))
        >>> it.at(1)
        RayVector([1, 0])
        >>> it[-1]
        RayVector([0, 1])
    """

    def __init__(
        self,
        element_type: type,
        scalar: ScalarDomain,
        obj: Any,
        accessor: Accessor,
        n: int,
        options: Mapping[str, Any] | None = None,
    ):
        if n < 0:
            raise ValueError(f"length must be non-negative, got {n}")
        self._element_type = element_type
        self._scalar = scalar
        self._obj = obj
        self._accessor = accessor
        self._n = int(n)
        self._options = MappingProxyType(dict(options or {}))

    @property
    def element_type(self) -> type:
        return self._element_type

    @property
    def scalar(self) -> ScalarDomain:
        return self._scalar

    @property
    def backing(self) -> Any:
        return self._obj

    @property
    def accessor(self) -> Accessor:
        return self._accessor

    @property
    def options(self) -> Mapping[str, Any]:
        return self._options

    def at(self, i: int):
        """Element at 1-based position i.

        Raises:
            IndexOutOfRange: If i is not in [1, n]
        """
        if isinstance(i, bool) or not isinstance(i, (int, np.integer)) or not 1 <= i <= self._n:
            raise IndexOutOfRange(i, self._n)
        return ELEMENT(
            self._accessor, self._element_type, self._scalar, self._obj, int(i), **self._options
        )

    def __len__(self) -> int:
        return self._n

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self.at(k + 1) for k in range(*index.indices(self._n))]
        if isinstance(index, bool):
            raise IndexOutOfRange(index, self._n)
        if isinstance(index, (int, np.integer)) and index < 0:
            index += self._n
        if isinstance(index, (int, np.integer)) and not 0 <= index < self._n:
            raise IndexOutOfRange(index, self._n)
        return self.at(index + 1)

    def __iter__(self):
        for i in range(1, self._n + 1):
            yield self.at(i)

    def materialize(self, homogenized: bool = False) -> np.ndarray:
        """The whole property as one block.

        Points and rays give their generator matrix (homogenized on request),
        affine elements their affine matrix, everything else its linear
        matrix.

        Raises:
            UnsupportedOperation: If the accessor has no bulk form
        """
        element = self._element_type
        if issubclass(element, (PointVector, RayVector)):
            if homogenized:
                return mat.homogenized_matrix(self)
            return mat.as_matrix(self)
        if issubclass(element, (AffineHalfspace, AffineHyperplane, Polyhedron)):
            return mat.affine_matrix_for_kernel(self)
        return mat.linear_matrix_for_kernel(self)

    def __repr__(self) -> str:
        return (f"{len(self)}-element LazyPropertyIterator"
                f"[{self._element_type.__name__}, {self._scalar.value}]")
