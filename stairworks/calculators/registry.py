"""
Calculator registry — maps job_type strings to calculator classes.

"stairs" covers masonry plus optional slabs; "stair_slabs" is slabs only.
"""

from .stair_calculator import StairCalculator, StairSlabCalculator
from .base import BaseCalculator

CALCULATOR_REGISTRY: dict[str, type] = {
    "stairs": StairCalculator,
    "stair_slabs": StairSlabCalculator,
}


def get_calculator(job_type: str, **kwargs) -> BaseCalculator:
    """Returns an instance of the calculator for a job type, or raises ValueError."""
    if job_type not in CALCULATOR_REGISTRY:
        raise ValueError(
            f"No calculator registered for job type: {job_type}. "
            f"Available: {list(CALCULATOR_REGISTRY.keys())}"
        )
    return CALCULATOR_REGISTRY[job_type](**kwargs)


def list_calculators() -> list[str]:
    """List all registered calculator job types."""
    return list(CALCULATOR_REGISTRY.keys())
