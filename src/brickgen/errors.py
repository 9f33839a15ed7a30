"""Exceptions raised by the brick geometry pipeline."""

from typing import Optional


class BrickGeometryError(Exception):
    """Base exception for brick generation errors."""
    pass


class InvalidParameter(BrickGeometryError, ValueError):
    """A brick parameter is malformed or out of range."""

    def __init__(self, parameter: str, value: object, message: str):
        self.parameter = parameter
        self.value = value
        super().__init__(f"{parameter}={value!r}: {message}")


class DegenerateGeometry(BrickGeometryError, ValueError):
    """A feature would be built with zero or negative extents."""

    def __init__(self, feature: str, message: str):
        self.feature = feature
        super().__init__(f"{feature}: {message}")


class KernelFailure(BrickGeometryError, RuntimeError):
    """The geometry kernel failed or returned a non-volume result."""

    def __init__(self, operation: str, message: str, feature: Optional[str] = None):
        self.operation = operation
        self.feature = feature
        where = f" ({feature})" if feature else ""
        super().__init__(f"{operation}{where}: {message}")
