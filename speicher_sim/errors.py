"""
Error taxonomy of the energy-balance engine.

Every failure of the core is one of three kinds:

* ``length_mismatch``: an hourly series is not exactly 8760 values long
  after normalization. Positional hour-by-hour arithmetic has no valid
  partial result, so this is always fatal.
* ``invalid_parameter``: a scalar is non-positive where positivity is
  required, or outside its physically valid range.
* ``data_validity``: a series holds non-finite or negative values where
  only non-negative finite energy is meaningful.

All three derive from :class:`ValueError`, so callers that already guard
numeric entry points with ``except ValueError`` keep working. The ``kind``
attribute is the stable identifier exposed by the API layer.
"""

from __future__ import annotations


class SimulationError(ValueError):
    """Base class for all errors raised by the simulation core."""

    kind = "simulation_error"


class LengthMismatchError(SimulationError):
    """
    Raised when a series does not have the expected number of hourly values.

    Attributes:
        name: Name of the offending series (e.g. ``"load"``).
        expected: Required length (8760 for every public operation).
        actual: Length that was received (total element count for
            multi-dimensional input).
        detail: Optional extra context appended to the message.
    """

    kind = "length_mismatch"

    def __init__(self, name: str, expected: int, actual: int, detail: str | None = None) -> None:
        self.name = name
        self.expected = expected
        self.actual = actual
        message = f"{name} length mismatch: expected {expected}, got {actual}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class InvalidParameterError(SimulationError):
    """Raised when a scalar parameter is out of its valid range."""

    kind = "invalid_parameter"

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(f"{name}: {message}")


class DataValidityError(SimulationError):
    """Raised when series values are non-finite, negative or unparsable."""

    kind = "data_validity"
