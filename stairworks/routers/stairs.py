"""
Stair estimating API.

GET  /api/stairs/options   — catalogues for the estimate form
POST /api/stairs/estimate  — masonry estimate, slabs included when slab_size is set
POST /api/stairs/slabs     — slab cutting plan only

Nothing here is persisted. Prices come from the material_prices table when
a row exists, otherwise from the in-code defaults.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import schemas
from ..calculators.course_selector import DEFAULT_SELECTION, MATERIAL_OPTIONS, BrickOrientation
from ..calculators.errors import StairEstimateError
from ..calculators.material_lookup import MaterialLookup
from ..calculators.registry import get_calculator, list_calculators
from ..calculators.slab_cutting import GAP_OPTIONS_MM, SLAB_SIZES, CutPolicy, Placement
from ..calculators.stair_geometry import StepConfig
from ..config import settings
from ..database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stairs", tags=["stairs"])


def _run(job_type: str, fields: dict, db: Session) -> dict:
    calculator = get_calculator(job_type, lookup=MaterialLookup(db))
    try:
        return calculator.calculate(fields)
    except StairEstimateError as e:
        logger.info("Rejected %s request: %s", job_type, e)
        raise HTTPException(status_code=400, detail=e.to_dict())


@router.get("/options")
def get_options():
    return {
        "materials": [
            {
                "id": option.id,
                "name": option.name,
                "course_height": option.course_height,
                "width": option.width,
                "length": option.length,
                "is_brick": option.is_brick,
            }
            for option in MATERIAL_OPTIONS.values()
        ],
        "job_types": list_calculators(),
        "default_materials": DEFAULT_SELECTION,
        "brick_orientations": [o.value for o in BrickOrientation],
        "step_configs": [c.value for c in StepConfig],
        "slab_sizes": list(SLAB_SIZES.keys()),
        "default_slab_size": settings.DEFAULT_SLAB_SIZE,
        "slab_placements": [p.value for p in Placement],
        "slab_cutting": [c.value for c in CutPolicy],
        "gap_options_mm": list(GAP_OPTIONS_MM),
        "default_gap_mm": settings.DEFAULT_SLAB_GAP_MM,
    }


@router.post("/estimate")
def estimate_stairs(request: schemas.StairEstimateRequest, db: Session = Depends(get_db)):
    return _run("stairs", request.model_dump(), db)


@router.post("/slabs")
def estimate_slabs(request: schemas.StairSlabRequest, db: Session = Depends(get_db)):
    return _run("stair_slabs", request.model_dump(), db)
