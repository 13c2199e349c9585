"""
Domain exceptions for layout computations.
"""


class LayoutError(ValueError):
    """Base class for rejected layout inputs."""
    pass


class InvalidSpacingError(LayoutError):
    """Raised when a vine or row spacing is not strictly positive."""

    def __init__(self, parameter: str, value: float):
        self.parameter = parameter
        self.value = value
        super().__init__(f"{parameter} must be greater than 0, got {value}")


def require_positive_spacing(parameter: str, value: float) -> None:
    """
    Reject a non-positive spacing before it is used as a divisor or loop bound.

    Args:
        parameter: Name reported in the error
        value: Spacing in feet

    Raises:
        InvalidSpacingError: If value is not greater than zero
    """
    if value is None or not value > 0:
        raise InvalidSpacingError(parameter, value)
