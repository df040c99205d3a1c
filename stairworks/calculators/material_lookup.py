"""
Material price lookup with fallback chain:
1. MaterialPrice rows in the database (maintained via /api/materials)
2. DEFAULT_PRICES from this file (market averages)

Prices are only attached to finished quantities for display. Nothing in
the estimator reads them when choosing units or cutting slabs.
"""

import logging
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

# FALLBACK PRICES: used when the database has no row for a material.
# None means "no known price": the estimate shows the quantity without a total.
DEFAULT_PRICES = {
    "4-inch Blocks": {"price_per_unit": 1.45, "unit": "pieces", "notes": "Dense concrete block 440x215x100"},
    "7-inch Blocks": {"price_per_unit": 1.95, "unit": "pieces", "notes": "Dense concrete block 440x215x140"},
    "Standard Bricks (9x6x21)": {"price_per_unit": 0.55, "unit": "pieces", "notes": "Common facing brick"},
    "Mortar": {"price_per_unit": 0.18, "unit": "kg", "notes": "General purpose mortar, 25 kg bag"},
    "Slab 90x60": {"price_per_unit": 14.50, "unit": "pieces", "notes": "Porcelain paving slab"},
    "Slab 60x60": {"price_per_unit": 9.80, "unit": "pieces", "notes": "Porcelain paving slab"},
    "Slab 60x30": {"price_per_unit": None, "unit": "pieces", "notes": "Price on request"},
    "Slab 30x30": {"price_per_unit": None, "unit": "pieces", "notes": "Price on request"},
}


def slab_material_name(size: str) -> str:
    return "Slab %s" % size


class MaterialLookup:
    """Price lookup keyed by material name."""

    def __init__(self, db=None):
        self.db = db

    def get_price_per_unit(self, name: str) -> Optional[float]:
        """Price per unit, or None if nobody has priced this material."""
        price, _ = self.get_price_with_source(name)
        return price

    def get_price_with_source(self, name: str) -> Tuple[Optional[float], str]:
        """(price, source) where source is 'database', 'default' or 'none'."""
        if self.db is not None:
            from .. import models
            row = self.db.query(models.MaterialPrice).filter(
                models.MaterialPrice.name == name
            ).first()
            if row is not None and row.price_per_unit is not None:
                return row.price_per_unit, "database"

        default = DEFAULT_PRICES.get(name)
        if default is not None and default["price_per_unit"] is not None:
            return default["price_per_unit"], "default"

        logger.debug("No price for material %r", name)
        return None, "none"
