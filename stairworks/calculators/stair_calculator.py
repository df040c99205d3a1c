"""
Stair job calculators — run the estimator pipeline from raw fields.

StairCalculator: step geometry -> course selection -> unit quantities,
plus a slab plan when a slab size is given.
StairSlabCalculator: step geometry -> slab plan only.

Prices come from MaterialLookup after quantities are final.
"""

import logging

from ..config import settings
from .base import BaseCalculator
from .course_selector import (
    DEFAULT_SELECTION,
    BrickOrientation,
    MortarRange,
    resolve_materials,
    select_courses,
)
from .errors import UnknownOption
from .material_lookup import MaterialLookup, slab_material_name
from .slab_cutting import CutPolicy, Overhangs, Placement, SlabPlan, plan_slab_cutting
from .stair_geometry import StairInputs, StepConfig, StepPlan, plan_steps, step_rows
from .unit_quantities import SIDE_BLOCK_ALLOWANCE_CM, SideConfig, compute_unit_quantities

logger = logging.getLogger(__name__)

REQUIRED_MEASUREMENTS = (
    "total_height",
    "total_width",
    "step_tread",
    "step_height",
    "slab_thickness_top",
    "slab_thickness_side",
    "slab_thickness_front",
    "overhang_front",
    "overhang_side",
)


class StairCalculator(BaseCalculator):

    job_type = "stairs"

    def __init__(self, lookup: MaterialLookup = None):
        self.lookup = lookup or MaterialLookup()

    def calculate(self, fields: dict) -> dict:
        inputs = self.parse_inputs(fields)
        orientation = self.parse_enum(BrickOrientation, fields.get("brick_orientation"),
                                      BrickOrientation.FLAT, "brick_orientation")
        if fields.get("materials") is None:
            material_ids = list(DEFAULT_SELECTION)
        else:
            material_ids = self.parse_list(fields.get("materials"))
        materials = resolve_materials(material_ids)

        plan = plan_steps(inputs)
        slab_plan = None
        if fields.get("slab_size"):
            slab_plan = self.plan_slabs(fields, inputs, plan)

        mortar_range = MortarRange(settings.MORTAR_MIN_CM, settings.MORTAR_MAX_CM)
        courses = select_courses(plan.steps, materials, orientation, mortar_range)
        sides = SideConfig(inputs.build_left, inputs.build_right, inputs.build_back)
        totals = compute_unit_quantities(plan, courses, materials, sides, orientation,
                                         settings.MORTAR_KG_PER_UNIT)

        items = []
        for quantity in totals.used():
            items.append(self.make_material_item(
                name=quantity.name,
                amount=quantity.total_units,
                unit="pieces",
                price_per_unit=self.lookup.get_price_per_unit(quantity.name),
                course_details=[d.as_dict() for d in quantity.course_details],
            ))
        items.append(self.make_material_item(
            name="Mortar",
            amount=totals.mortar_kg,
            unit="kg",
            price_per_unit=self.lookup.get_price_per_unit("Mortar"),
        ))
        if slab_plan is not None:
            items.append(self.slab_item(slab_plan))

        assumptions = self.geometry_assumptions(plan)
        assumptions.append("Mortar joints accepted between %.1f and %.1f cm; 1 cm is ideal." % (
            mortar_range.min, mortar_range.max))
        if sides.built_sides:
            assumptions.append("Front courses give up %.0f cm to each built side wall." % SIDE_BLOCK_ALLOWANCE_CM)
        cut_steps = [c.step for c in courses if c.needs_cutting]
        if cut_steps:
            assumptions.append("Units must be cut to height on step(s): %s." % ", ".join(str(s) for s in cut_steps))

        logger.info(
            "Stair estimate: %d steps, %d units, %.1f kg mortar%s",
            plan.step_count, totals.total_units, totals.mortar_kg,
            ", %d slabs" % slab_plan.total_slabs if slab_plan else "",
        )
        return self.make_estimate(
            items,
            assumptions,
            total_steps=plan.step_count,
            total_length=round(plan.total_length, 2),
            total_width=inputs.total_width,
            actual_step_width=round(plan.actual_step_width, 2),
            side_overhang=inputs.overhang_side,
            step_dimensions=step_rows(plan),
            courses=[
                {
                    "step": c.step,
                    "material_id": c.material_id,
                    "units_in_stack": c.units_in_stack,
                    "mortar_height": round(c.mortar_height, 2),
                    "needs_cutting": c.needs_cutting,
                    "cut_height": round(c.cut_height, 2),
                }
                for c in courses
            ],
            slabs=slab_plan.as_dict() if slab_plan else None,
        )

    # --- Shared with StairSlabCalculator ---

    def parse_inputs(self, fields: dict) -> StairInputs:
        """All measurements are checked before anything is computed."""
        values = {key: self.require_measurement(fields, key) for key in REQUIRED_MEASUREMENTS}
        return StairInputs(
            build_left=self.parse_bool(fields.get("build_left_side"), default=True),
            build_right=self.parse_bool(fields.get("build_right_side"), default=True),
            build_back=self.parse_bool(fields.get("build_back_side"), default=False),
            step_config=self.parse_enum(StepConfig, fields.get("step_config"), StepConfig.FRONTS_ON_TOP,
                                       "step_config"),
            **values
        )

    def parse_enum(self, enum_cls, value, default, field):
        """Blank means the default; anything else must be one of the enum values."""
        if value is None or value == "":
            return default
        try:
            return enum_cls(value)
        except ValueError:
            raise UnknownOption(
                "Unknown %s %r. Available: %s" % (field, value, [e.value for e in enum_cls]),
                field=field,
            )

    def plan_slabs(self, fields: dict, inputs: StairInputs, plan: StepPlan) -> SlabPlan:
        gap_mm = self.parse_number(fields.get("slab_gap_mm"), default=settings.DEFAULT_SLAB_GAP_MM)
        return plan_slab_cutting(
            plan.steps,
            total_width=inputs.total_width,
            slab=fields.get("slab_size") or settings.DEFAULT_SLAB_SIZE,
            placement=fields.get("slab_placement") or Placement.LONG_WAY,
            gap_mm=gap_mm,
            policy=fields.get("slab_cutting") or CutPolicy.ONE_CUT,
            overhangs=Overhangs(inputs.overhang_side, inputs.build_left, inputs.build_right),
        )

    def slab_item(self, slab_plan: SlabPlan) -> dict:
        name = slab_material_name(slab_plan.slab.size)
        return self.make_material_item(
            name=name,
            amount=slab_plan.total_slabs,
            unit="pieces",
            price_per_unit=self.lookup.get_price_per_unit(name),
        )

    def geometry_assumptions(self, plan: StepPlan) -> list:
        assumptions = [
            "%d steps: first step %.1f cm, others %.1f cm high." % (
                plan.step_count, plan.first_step_height, plan.regular_step_height),
            "Stair length %.1f cm; top tread shortened by the front slab." % plan.total_length,
            "Built stairs are lower than measured by the top slab thickness.",
        ]
        return assumptions


class StairSlabCalculator(StairCalculator):
    """Finishing slabs only — no masonry units."""

    job_type = "stair_slabs"

    def calculate(self, fields: dict) -> dict:
        inputs = self.parse_inputs(fields)
        plan = plan_steps(inputs)
        slab_plan = self.plan_slabs(fields, inputs, plan)

        assumptions = self.geometry_assumptions(plan)
        assumptions.append("%d off-cut(s) left over, available for reuse on a future job." % len(slab_plan.waste))

        logger.info(
            "Slab estimate: %d steps, %d slabs (%d tread, %d front), %d cuts",
            plan.step_count, slab_plan.total_slabs, slab_plan.total_step_slabs,
            slab_plan.total_front_slabs, slab_plan.total_cuts,
        )
        return self.make_estimate(
            [self.slab_item(slab_plan)],
            assumptions,
            total_steps=plan.step_count,
            total_length=round(plan.total_length, 2),
            total_width=inputs.total_width,
            side_overhang=inputs.overhang_side,
            step_dimensions=step_rows(plan),
            slabs=slab_plan.as_dict(),
        )
