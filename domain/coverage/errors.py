"""Coverage Bounded Context - Error Hierarchy.

Custom exceptions for RF link calculations.

Service functions raise InvalidParameterError for bad bare arguments.
Constructing an RFParameters (or any other value object) with out-of-range
fields raises pydantic.ValidationError instead, so callers that accept both
should catch the two.
"""

from __future__ import annotations


class CoverageError(Exception):
    """Base error for coverage operations."""


class InvalidParameterError(CoverageError):
    """RF parameter is outside the documented domain.

    Raised for spreading factor / bandwidth combinations missing from the
    sensitivity table, for coding rates outside 4/5..4/8 and for carrier
    frequencies that are not positive.

    Attributes:
        name: Parameter name (e.g. "spreading_factor")
        value: The offending value
    """

    def __init__(self, name: str, value: object, allowed: object) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid {name}: {value!r} (allowed: {allowed})")
