from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class MaterialPriceBase(BaseModel):
    name: str
    unit: str = "pieces"
    price_per_unit: Optional[float] = None
    notes: Optional[str] = None

class MaterialPriceUpdate(BaseModel):
    unit: Optional[str] = None
    price_per_unit: Optional[float] = None
    notes: Optional[str] = None

class MaterialPrice(MaterialPriceBase):
    id: int
    updated_at: datetime
    class Config:
        from_attributes = True


# --- Stair estimate requests ---
# Measurements are Optional so a missing one reaches the calculator and is
# reported as MissingMeasurement with the field name.

class StairMeasurements(BaseModel):
    total_height: Optional[float] = None
    total_width: Optional[float] = None
    step_tread: Optional[float] = None
    step_height: Optional[float] = None
    slab_thickness_top: Optional[float] = None
    slab_thickness_side: Optional[float] = None
    slab_thickness_front: Optional[float] = None
    overhang_front: Optional[float] = None
    overhang_side: Optional[float] = None
    build_left_side: bool = True
    build_right_side: bool = True
    build_back_side: bool = False
    step_config: str = "frontsOnTop"

class SlabOptions(BaseModel):
    slab_size: Optional[str] = None
    slab_placement: str = "longWay"
    slab_gap_mm: Optional[float] = None
    slab_cutting: str = "oneCut"

class StairEstimateRequest(StairMeasurements, SlabOptions):
    materials: Optional[List[str]] = None
    brick_orientation: str = "flat"

class StairSlabRequest(StairMeasurements, SlabOptions):
    pass
