"""
Course selection — picks the masonry unit and stack height for each step.

For every step the selector walks the selected units in order and looks for
a stack whose leftover gap falls inside the accepted mortar joint range,
preferring the gap closest to a 1 cm joint. If no unit fits, the stack that
overshoots the step the least is chosen and flagged for cutting.

This is a per-step greedy choice: it never trades one step against another
and ignores unit cost.
"""

import enum
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import NoMaterialSelected
from .stair_geometry import StepDimension

logger = logging.getLogger(__name__)

MORTAR_MIN_CM = 0.5
MORTAR_MAX_CM = 3.0
IDEAL_JOINT_CM = 1.0
NEAR_IDEAL_CM = 0.3          # within this of the ideal joint → take it
EXACT_FIT_CM = 0.1           # single unit matches the step outright
BRICK_GOOD_FIT_CM = 1.5      # brick multiple this close → take it
_EPS = 1e-9


class BrickOrientation(str, enum.Enum):
    FLAT = "flat"
    SIDE = "side"


@dataclass(frozen=True)
class MortarRange:
    min: float = MORTAR_MIN_CM
    max: float = MORTAR_MAX_CM

    def accepts(self, gap: float) -> bool:
        return self.min - _EPS <= gap <= self.max + _EPS


@dataclass(frozen=True)
class MaterialOption:
    """
    One masonry unit as it is laid in a course.

    course_height is the height of one course, width the wall thickness.
    Bricks can be turned on their side, which swaps the two.
    """
    id: str
    name: str
    course_height: float
    width: float
    length: float
    is_brick: bool = False

    def placed_dimensions(self, orientation: BrickOrientation = BrickOrientation.FLAT) -> Tuple[float, float]:
        """(course height, wall thickness) for the given brick orientation."""
        if self.is_brick and orientation == BrickOrientation.SIDE:
            return self.width, self.course_height
        return self.course_height, self.width


# Blocks are laid flat: the 10/14 cm face is the course, 21 cm is the wall.
MATERIAL_OPTIONS: Dict[str, MaterialOption] = {
    "blocks4": MaterialOption("blocks4", "4-inch Blocks", course_height=10, width=21, length=44),
    "blocks7": MaterialOption("blocks7", "7-inch Blocks", course_height=14, width=21, length=44),
    "bricks": MaterialOption("bricks", "Standard Bricks (9x6x21)", course_height=6, width=9,
                             length=21, is_brick=True),
}

DEFAULT_SELECTION = ["blocks4", "blocks7"]


@dataclass(frozen=True)
class CourseAssignment:
    step: int                # 1-based
    material_id: str
    units_in_stack: int
    mortar_height: float
    needs_cutting: bool
    cut_height: float = 0.0  # how far the stack overshoots when cutting


@dataclass
class _Candidate:
    material_id: str
    units: int
    mortar: float


def resolve_materials(material_ids, catalogue=None):
    # type: (Sequence[str], Optional[Dict[str, MaterialOption]]) -> List[MaterialOption]
    """Look up selected ids, skipping unknown ones. Order is preserved."""
    catalogue = catalogue or MATERIAL_OPTIONS
    resolved = []
    for material_id in material_ids or []:
        option = catalogue.get(material_id)
        if option is None:
            logger.warning("Unknown material id %r ignored", material_id)
            continue
        resolved.append(option)
    if not resolved:
        raise NoMaterialSelected("Please select at least one material.", field="materials")
    return resolved


def select_courses(steps, materials, brick_orientation=BrickOrientation.FLAT, mortar_range=None):
    # type: (Sequence[StepDimension], Sequence[MaterialOption], BrickOrientation, Optional[MortarRange]) -> List[CourseAssignment]
    """One CourseAssignment per step, in step order."""
    if not materials:
        raise NoMaterialSelected("Please select at least one material.", field="materials")
    mortar_range = mortar_range or MortarRange()

    assignments = []
    for index, step in enumerate(steps):
        assignment = _select_for_step(index + 1, step.height, materials, brick_orientation, mortar_range)
        logger.debug(
            "Step %d (%.2f cm): %s x%d, mortar %.2f, cut %s",
            assignment.step, step.height, assignment.material_id,
            assignment.units_in_stack, assignment.mortar_height, assignment.needs_cutting,
        )
        assignments.append(assignment)
    return assignments


def _select_for_step(step_number, step_height, materials, orientation, mortar_range):
    # type: (int, float, Sequence[MaterialOption], BrickOrientation, MortarRange) -> CourseAssignment
    best = None  # type: Optional[_Candidate]

    for material in materials:
        unit_height, _ = material.placed_dimensions(orientation)

        # Exact fit: one unit is the step
        if abs(step_height - unit_height) < EXACT_FIT_CM:
            return CourseAssignment(step_number, material.id, 1, 0.0, False)

        # Range search, tallest stack first
        for stacked in range(int(math.floor(step_height / unit_height)), 0, -1):
            remaining = step_height - stacked * unit_height
            if not mortar_range.accepts(remaining):
                continue
            if best is None or _joint_error(remaining) < _joint_error(best.mortar):
                best = _Candidate(material.id, stacked, remaining)
            if _joint_error(remaining) < NEAR_IDEAL_CM:
                return CourseAssignment(step_number, material.id, stacked, remaining, False)

        # Flat bricks: a stack close to a whole number of courses
        if material.is_brick and orientation == BrickOrientation.FLAT:
            multiple = int(math.floor(step_height / unit_height + 0.5))
            difference = abs(step_height - multiple * unit_height)
            if multiple > 0 and difference <= mortar_range.max + _EPS:
                if difference <= BRICK_GOOD_FIT_CM + _EPS:
                    return CourseAssignment(step_number, material.id, multiple, difference, False)
                if best is None or _joint_error(difference) < _joint_error(best.mortar):
                    best = _Candidate(material.id, multiple, difference)

    if best is not None:
        return CourseAssignment(step_number, best.material_id, best.units, best.mortar, False)

    return _cutting_fallback(step_number, step_height, materials, orientation)


def _cutting_fallback(step_number, step_height, materials, orientation):
    # type: (int, float, Sequence[MaterialOption], BrickOrientation) -> CourseAssignment
    chosen = None  # type: Optional[Tuple[str, int, float]]
    for material in materials:
        unit_height, _ = material.placed_dimensions(orientation)
        units = max(1, int(math.ceil(step_height / unit_height - _EPS)))
        overshoot = units * unit_height - step_height
        if chosen is None or overshoot < chosen[2]:
            chosen = (material.id, units, overshoot)

    material_id, units, overshoot = chosen
    return CourseAssignment(step_number, material_id, units, 0.0, True, cut_height=max(0.0, overshoot))


def _joint_error(gap: float) -> float:
    return abs(gap - IDEAL_JOINT_CM)
