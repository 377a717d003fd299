"""
Exception hierarchy.

Every failure raised by the access layer derives from PolyhedralError and,
where it makes sense, from the matching builtin so that callers catching
ValueError or IndexError keep working.
"""


class PolyhedralError(Exception):
    """Base class for all errors raised by polyhedral_geometry."""


class UnrecognizedScalarDomain(PolyhedralError, LookupError):
    """Kernel object declares a scalar type with no entry in the domain table."""

    def __init__(self, type_name: str, token: str):
        self.type_name = type_name
        self.token = token
        super().__init__(
            f"unrecognized scalar domain {token!r} in kernel type {type_name!r}"
        )


class IndexOutOfRange(PolyhedralError, IndexError):
    """Element access outside of [1, n]."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"index {index} out of range for length {length}")


class ArgumentError(PolyhedralError, ValueError):
    """Precondition violated by the arguments of a call."""


class UnsupportedOperation(ArgumentError):
    """Capability is not registered for the accessor of an iterator."""

    def __init__(self, capability: str):
        self.capability = capability
        super().__init__(f"{capability} not defined in this context.")


class NotLinear(ArgumentError):
    """Affine block has a non-zero bound column and cannot be made linear."""

    def __init__(self, message: str = "Input not linear."):
        super().__init__(message)


class InvalidHomogenization(ArgumentError):
    """Homogenization value does not match the role of the elements."""


class KernelError(PolyhedralError, RuntimeError):
    """The geometry kernel could not answer a query."""
