"""
Input-validation failures for the stair estimator.

Every error is raised before any output structure is built, so callers
either get a complete result or one of these — never a partial plan.
Routers translate them into 400 responses.
"""


class StairEstimateError(ValueError):
    """Base class for all deterministic input failures."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        return {
            "error": type(self).__name__,
            "field": self.field,
            "message": self.message,
        }


class MissingMeasurement(StairEstimateError):
    """A required measurement is absent or not a number."""


class InvalidStepCount(StairEstimateError):
    """Adjusted height / step height rounds to zero or fewer steps."""


class InvalidStepWidth(StairEstimateError):
    """Side allowances consume the whole stair width."""


class InvalidStepTread(StairEstimateError):
    """Overhang and front slab leave no tread to build."""


class NoMaterialSelected(StairEstimateError):
    """No usable masonry unit was selected."""


class InvalidSlabConfiguration(StairEstimateError):
    """Slab stock, placement, gap or cut policy cannot cover the steps."""


class UnknownOption(StairEstimateError):
    """A choice field (step config, brick orientation) has no such value."""
