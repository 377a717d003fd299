"""
Wrappers around kernel objects.

A Cone or Polyhedron owns a kernel handle and the scalar domain that handle
was built with. The domain is read off the kernel type name once, when the
wrapper is created, and never checked again.
"""

import logging
from enum import Enum

from . import kernel
from .errors import ArgumentError, UnrecognizedScalarDomain
from .scalars import KERNEL_TOKEN_TO_SCALAR, ScalarDomain

logger = logging.getLogger(__name__)

# Offset of the first character of the scalar token in the kernel type name:
# "Cone<" is 5 characters, "Polytope<" is 9.
KERNEL_NAME_OFFSETS = {
    "Cone": 5,
    "Polyhedron": 9,
}


def detect_scalar_domain(owner: str, obj: kernel.KernelObject) -> ScalarDomain:
    """Determine the scalar domain of a kernel object from its type name.

    Args:
        owner: Name of the wrapper type, "Cone" or "Polyhedron"
        obj: Kernel object handle

    Returns:
        The matching ScalarDomain

    Raises:
        UnrecognizedScalarDomain: If the type name carries an unknown token
    """
    name = kernel.type_name(obj)
    token = name[KERNEL_NAME_OFFSETS[owner]:-1]
    try:
        return KERNEL_TOKEN_TO_SCALAR[token]
    except KeyError:
        raise UnrecognizedScalarDomain(name, token) from None


class Boundedness(Enum):
    UNKNOWN = "unknown"
    BOUNDED = "bounded"
    UNBOUNDED = "unbounded"


class _BackingObject:
    _owner = ""

    def __init__(self, obj: kernel.KernelObject, scalar: ScalarDomain | None = None):
        detected = detect_scalar_domain(self._owner, obj)
        if scalar is not None and scalar is not detected:
            raise ArgumentError(
                f"{self._owner} requested over {scalar.value} but kernel object "
                f"is {kernel.type_name(obj)}"
            )
        self._obj = obj
        self._scalar = detected
        logger.debug("Wrapped %s as %s", kernel.type_name(obj), self._owner)

    @property
    def kernel_object(self) -> kernel.KernelObject:
        return self._obj

    @property
    def scalar(self) -> ScalarDomain:
        return self._scalar


class Cone(_BackingObject):
    """A polyhedral cone held by the geometry kernel."""

    _owner = "Cone"

    def __repr__(self) -> str:
        ambient = kernel.read_scalar(self._obj, "CONE_AMBIENT_DIM")
        return f"A polyhedral cone in ambient dimension {ambient}"


class Polyhedron(_BackingObject):
    """A polyhedron held by the geometry kernel in homogenized form.

    The boundedness tag records what was known when the polyhedron was built;
    it is not updated when the kernel later finds out.
    """

    _owner = "Polyhedron"

    def __init__(
        self,
        obj: kernel.KernelObject,
        boundedness: Boundedness = Boundedness.UNKNOWN,
        scalar: ScalarDomain | None = None,
    ):
        super().__init__(obj, scalar)
        self._boundedness = Boundedness(boundedness)

    @property
    def boundedness(self) -> Boundedness:
        return self._boundedness

    def __repr__(self) -> str:
        ambient = kernel.read_scalar(self._obj, "CONE_AMBIENT_DIM") - 1
        return f"A polyhedron in ambient dimension {ambient}"
