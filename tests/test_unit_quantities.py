"""
Unit quantity tests.

Tests:
1-2. Front rows and side runs per step
3.   Back wall only above the first step
4.   No sides built → full front width, no side units
5.   Stacked units multiply every face
6-7. Per-material totals, mortar estimate, unused materials
"""

import pytest

from stairworks.calculators.course_selector import MATERIAL_OPTIONS, CourseAssignment
from stairworks.calculators.stair_geometry import StepDimension, StepPlan
from stairworks.calculators.unit_quantities import SideConfig, compute_unit_quantities


def _plan():
    """Two 18 cm steps, 30 cm treads, 120 cm wide."""
    return StepPlan(
        steps=(StepDimension(18, 30, True), StepDimension(18, 30, False)),
        step_count=2,
        total_length=60,
        regular_step_height=18,
        first_step_height=18,
        actual_step_width=120,
        total_width=120,
    )


def _courses(material_id="blocks4", units=(1, 1)):
    return [CourseAssignment(i + 1, material_id, u, 1.0, False) for i, u in enumerate(units)]


def _materials():
    return [MATERIAL_OPTIONS["blocks4"], MATERIAL_OPTIONS["blocks7"]]


def test_front_and_side_units_per_step():
    """
    Front: 120 - 2 x 20 = 80 cm → ceil(80 / 45) = 2 units per row.
    Step 1 carries 2 rows, step 2 one. Sides run 60 then 30 cm.
    """
    totals = compute_unit_quantities(_plan(), _courses(), _materials())
    details = totals.materials["blocks4"].course_details

    assert details[0].rows == 2
    assert details[0].front_units == 4
    assert details[0].side_units == 4   # ceil(60/45) = 2 per side
    assert details[1].rows == 1
    assert details[1].front_units == 2
    assert details[1].side_units == 2   # ceil(30/45) = 1 per side
    assert totals.materials["blocks4"].total_units == 12


def test_detail_dict_shape():
    totals = compute_unit_quantities(_plan(), _courses(), _materials())
    row = totals.materials["blocks4"].course_details[0].as_dict()
    assert row == {
        "step": 1,
        "blocks": 8,
        "rows": 2,
        "material": "4-inch Blocks",
        "mortar_height": 1.0,
        "needs_cutting": False,
        "front": 4,
        "sides": 4,
        "back": 0,
    }


def test_back_wall_skips_first_step():
    """Back width 120 - 2 x 21 = 78 → 2 units, only on step 2."""
    sides = SideConfig(left=True, right=True, back=True)
    totals = compute_unit_quantities(_plan(), _courses(), _materials(), sides)
    details = totals.materials["blocks4"].course_details
    assert details[0].back_units == 0
    assert details[1].back_units == 2
    assert totals.materials["blocks4"].total_units == 14


def test_no_sides_uses_full_width():
    sides = SideConfig(left=False, right=False)
    totals = compute_unit_quantities(_plan(), _courses(), _materials(), sides)
    details = totals.materials["blocks4"].course_details
    assert details[0].front_units == 6   # ceil(120/45) = 3 x 2 rows
    assert details[0].side_units == 0
    assert totals.materials["blocks4"].total_units == 9


def test_stacked_units_multiply_faces():
    totals = compute_unit_quantities(_plan(), _courses(units=(2, 1)), _materials())
    first = totals.materials["blocks4"].course_details[0]
    assert first.front_units == 8
    assert first.side_units == 8


def test_totals_and_mortar():
    courses = [
        CourseAssignment(1, "blocks4", 1, 1.0, False),
        CourseAssignment(2, "blocks7", 1, 1.0, False),
    ]
    totals = compute_unit_quantities(_plan(), courses, _materials(), mortar_kg_per_unit=0.5)
    assert totals.materials["blocks4"].total_units == 8
    assert totals.materials["blocks7"].total_units == 4
    assert totals.total_units == 12
    assert totals.mortar_kg == pytest.approx(6.0)
    assert [q.material_id for q in totals.used()] == ["blocks4", "blocks7"]


def test_unused_material_is_left_out():
    totals = compute_unit_quantities(_plan(), _courses(), _materials())
    assert [q.material_id for q in totals.used()] == ["blocks4"]
    assert totals.materials["blocks7"].total_units == 0
