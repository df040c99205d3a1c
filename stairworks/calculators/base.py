"""
Abstract base class for all job-type calculators.

Input: raw fields dict (form or API body, values may be strings)
Output: plain dict ready for JSON — the estimate contract used by routers
"""

import logging
import math
from abc import ABC, abstractmethod

from .errors import MissingMeasurement

logger = logging.getLogger(__name__)

_TRUE_STRINGS = ("1", "true", "yes", "y", "on")
_FALSE_STRINGS = ("0", "false", "no", "n", "off", "")


class BaseCalculator(ABC):
    """All job-type calculators inherit from this."""

    job_type = ""

    @abstractmethod
    def calculate(self, fields: dict) -> dict:
        """
        Takes the answered fields.
        Returns the estimate dict for this job type.
        """
        pass

    # --- Helper methods for all calculators ---

    def parse_number(self, value, default: float = None) -> float:
        """Parse a numeric value from user input. Handles '12', '12.5', '12 cm'.

        NaN and infinity count as unparseable.
        """
        if value is None:
            return default
        if isinstance(value, bool):
            return default
        try:
            number = float(str(value).strip().rstrip("cm").strip())
        except (ValueError, TypeError):
            return default
        if not math.isfinite(number):
            return default
        return number

    def require_measurement(self, fields: dict, key: str) -> float:
        """Numeric field that must be present. Raises MissingMeasurement."""
        value = self.parse_number(fields.get(key))
        if value is None:
            raise MissingMeasurement(
                "Please fill in all required measurements (missing %s)." % key,
                field=key,
            )
        return value

    def parse_bool(self, value, default: bool = False) -> bool:
        """Parse a checkbox-style value."""
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        return default

    def parse_list(self, value) -> list:
        """Accept a list or a comma-separated string."""
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [str(v).strip() for v in value if str(v).strip()]
        return [part.strip() for part in str(value).split(",") if part.strip()]

    def make_material_item(self, name: str, amount: float, unit: str,
                           price_per_unit: float = None,
                           course_details: list = None) -> dict:
        """One material line. Prices stay None when the lookup has none."""
        total_price = None
        if price_per_unit is not None:
            total_price = round(price_per_unit * amount, 2)
        item = {
            "name": name,
            "amount": round(amount, 2),
            "unit": unit,
            "price_per_unit": round(price_per_unit, 2) if price_per_unit is not None else None,
            "total_price": total_price,
        }
        if course_details is not None:
            item["course_details"] = course_details
        return item

    def make_estimate(self, materials: list, assumptions: list = None, **sections) -> dict:
        """Build the estimate output dict."""
        priced = [m["total_price"] for m in materials if m.get("total_price") is not None]
        estimate = {
            "job_type": self.job_type,
            "materials": materials,
            "total_price": round(sum(priced), 2) if priced else None,
            "assumptions": assumptions or [],
        }
        estimate.update(sections)
        return estimate
