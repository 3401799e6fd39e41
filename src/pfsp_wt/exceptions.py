"""Exception types raised by the weighted-tardiness PFSP package."""

from __future__ import annotations


class PFSPError(Exception):
    """Base class for all package errors."""


class InvalidInstance(PFSPError, ValueError):
    """Raised for malformed instance data or an unusable temperature."""


class UnsupportedOperation(PFSPError, NotImplementedError):
    """Raised when an operator is asked for something it cannot provide."""


class UnknownEnumValue(PFSPError, ValueError):
    """Raised for an unrecognised pivot, neighborhood, order or init method."""


__all__ = ["PFSPError", "InvalidInstance", "UnsupportedOperation", "UnknownEnumValue"]
