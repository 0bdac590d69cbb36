"""
===============================================================================
QUATALG - Exception Hierarchy
===============================================================================
Every error raised by the library derives from QuaternionError and also from
the builtin exception a caller would naturally expect, so that
``except ZeroDivisionError`` or ``except ValueError`` keep working.
===============================================================================
"""


class QuaternionError(Exception):
    """Base class for all quatalg errors."""


class ZeroNormError(QuaternionError, ZeroDivisionError):
    """Raised when inverting or dividing by a quaternion of zero norm."""


class ShapeError(QuaternionError, ValueError):
    """Raised when an array cannot be reinterpreted as quaternions."""


class UnsupportedScalarError(QuaternionError, TypeError):
    """Raised when a value cannot be used as a quaternion component."""


class ResamplingError(QuaternionError, RuntimeError):
    """Raised when random rotors keep landing on near-zero norms."""


class ConfigError(QuaternionError, ValueError):
    """Raised when configuration validation fails."""
