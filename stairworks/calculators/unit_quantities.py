"""
Unit quantities — how many masonry units each step's faces take.

Each step's front is built up through every step above it, so the bottom
step's front carries the most rows. Sides run the remaining stair length
from that step back; the back wall gets one row per step above the first.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .course_selector import BrickOrientation, CourseAssignment, MaterialOption
from .stair_geometry import StepPlan

logger = logging.getLogger(__name__)

MORTAR_JOINT_CM = 1.0          # added to every unit's length
SIDE_BLOCK_ALLOWANCE_CM = 20.0  # front width given up to each built side
MORTAR_KG_PER_UNIT = 0.5


@dataclass(frozen=True)
class SideConfig:
    left: bool = True
    right: bool = True
    back: bool = False

    @property
    def built_sides(self) -> int:
        return int(self.left) + int(self.right)


@dataclass(frozen=True)
class CourseDetail:
    step: int
    units: int
    rows: int
    material: str
    mortar_height: float
    needs_cutting: bool
    front_units: int
    side_units: int
    back_units: int

    def as_dict(self) -> dict:
        return {
            "step": self.step,
            "blocks": self.units,
            "rows": self.rows,
            "material": self.material,
            "mortar_height": round(self.mortar_height, 2),
            "needs_cutting": self.needs_cutting,
            "front": self.front_units,
            "sides": self.side_units,
            "back": self.back_units,
        }


@dataclass
class MaterialQuantity:
    material_id: str
    name: str
    total_units: int = 0
    course_details: List[CourseDetail] = field(default_factory=list)


@dataclass
class MaterialTotals:
    materials: Dict[str, MaterialQuantity]
    mortar_kg: float

    @property
    def total_units(self) -> int:
        return sum(q.total_units for q in self.materials.values())

    def used(self) -> List[MaterialQuantity]:
        """Materials that ended up with at least one unit, in selection order."""
        return [q for q in self.materials.values() if q.total_units > 0]


def compute_unit_quantities(plan, courses, materials, sides=None,
                            brick_orientation=BrickOrientation.FLAT,
                            mortar_kg_per_unit=MORTAR_KG_PER_UNIT):
    # type: (StepPlan, Sequence[CourseAssignment], Sequence[MaterialOption], SideConfig, BrickOrientation, float) -> MaterialTotals
    """
    Aggregate unit counts per material across all steps.

    `materials` is the selection the courses were chosen from; its order
    decides the order of the totals.
    """
    sides = sides or SideConfig()
    by_id = {m.id: m for m in materials}
    totals = {m.id: MaterialQuantity(m.id, m.name) for m in materials}

    front_width = max(0.0, plan.total_width - SIDE_BLOCK_ALLOWANCE_CM * sides.built_sides)

    for course in courses:
        material = by_id.get(course.material_id)
        if material is None:
            logger.warning("Course for step %d uses unselected material %r", course.step, course.material_id)
            continue
        index = course.step - 1
        _, wall_width = material.placed_dimensions(brick_orientation)
        effective_length = material.length + MORTAR_JOINT_CM

        rows = plan.step_count - index
        blocks_per_row = int(math.ceil(front_width / effective_length))
        front_units = blocks_per_row * rows * course.units_in_stack

        side_units = 0
        if sides.left or sides.right:
            remaining_length = plan.total_length - plan.treads_before(index)
            blocks_per_side = max(1, int(math.ceil(remaining_length / effective_length)))
            side_units = course.units_in_stack * blocks_per_side * sides.built_sides

        back_units = 0
        if sides.back and index > 0:
            back_width = max(0.0, plan.total_width - wall_width * sides.built_sides)
            back_units = int(math.ceil(back_width / effective_length)) * course.units_in_stack

        step_units = front_units + side_units + back_units
        quantity = totals[material.id]
        quantity.total_units += step_units
        quantity.course_details.append(CourseDetail(
            step=course.step,
            units=step_units,
            rows=rows,
            material=material.name,
            mortar_height=course.mortar_height,
            needs_cutting=course.needs_cutting,
            front_units=front_units,
            side_units=side_units,
            back_units=back_units,
        ))

    total_units = sum(q.total_units for q in totals.values())
    return MaterialTotals(materials=totals, mortar_kg=total_units * mortar_kg_per_unit)
