"""
Step geometry — splits a staircase into whole, uniform steps.

The slab on top of the stair is subtracted from the total height before the
split, so the built steps come out shorter than the raw measurements and
reach the exact finished height once slabs are laid. The first step absorbs
the rounding remainder; every other step uses the requested step height.

All lengths in centimeters.
"""

import enum
import logging
import math
from dataclasses import dataclass
from typing import List, Tuple

from .errors import InvalidStepCount, InvalidStepTread, InvalidStepWidth

logger = logging.getLogger(__name__)


class StepConfig(str, enum.Enum):
    FRONTS_ON_TOP = "frontsOnTop"
    STEPS_TO_FRONTS = "stepsToFronts"


@dataclass(frozen=True)
class StairInputs:
    """Overall stair measurements as entered on site."""
    total_height: float
    total_width: float
    step_tread: float
    step_height: float
    slab_thickness_top: float
    slab_thickness_side: float
    slab_thickness_front: float
    overhang_front: float
    overhang_side: float
    build_left: bool = True
    build_right: bool = True
    build_back: bool = False
    step_config: StepConfig = StepConfig.FRONTS_ON_TOP


@dataclass(frozen=True)
class StepDimension:
    height: float
    tread: float
    is_first: bool


@dataclass(frozen=True)
class StepPlan:
    steps: Tuple[StepDimension, ...]
    step_count: int
    total_length: float
    regular_step_height: float
    first_step_height: float
    actual_step_width: float
    total_width: float

    def treads_before(self, index: int) -> float:
        """Sum of the treads of all steps below step `index`."""
        return sum(step.tread for step in self.steps[:index])


def top_tread_reduction(step_config, slab_thickness_front):
    # type: (StepConfig, float) -> float
    """
    How much shorter the top tread is than the others.

    Fronts on top and steps coming to the fronts both lose the front slab
    thickness today. Any difference between the two configs belongs here.
    """
    return slab_thickness_front


def tread_for_step(index, step_count, adjusted_tread, slab_thickness_front, step_config):
    # type: (int, int, float, float, StepConfig) -> float
    if index != step_count - 1:
        return adjusted_tread
    return adjusted_tread - top_tread_reduction(step_config, slab_thickness_front)


def side_allowance(inputs: StairInputs) -> float:
    """Width lost to side overhang + side slab on every built side."""
    per_side = inputs.overhang_side + inputs.slab_thickness_side
    return (per_side if inputs.build_left else 0.0) + (per_side if inputs.build_right else 0.0)


def plan_steps(inputs: StairInputs) -> StepPlan:
    """
    Partition the stair into `step_count` steps.

    Raises InvalidStepCount, InvalidStepWidth or InvalidStepTread before
    building anything when the measurements cannot produce a stair.
    """
    if inputs.step_height <= 0:
        raise InvalidStepCount("Step height must be greater than zero.", field="step_height")

    adjusted_height = inputs.total_height - inputs.slab_thickness_top
    step_count = int(_round_half_up(adjusted_height / inputs.step_height))
    if step_count <= 0:
        raise InvalidStepCount(
            "Invalid step count (%d). Please check your measurements." % step_count,
            field="total_height",
        )

    regular_step_height = inputs.step_height
    first_step_height = adjusted_height - regular_step_height * (step_count - 1)

    actual_step_width = inputs.total_width - side_allowance(inputs)
    if actual_step_width <= 0:
        raise InvalidStepWidth(
            "Invalid step width (%.1f cm). Please check your measurements." % actual_step_width,
            field="total_width",
        )

    adjusted_tread = inputs.step_tread - inputs.overhang_front
    treads = [
        tread_for_step(i, step_count, adjusted_tread,
                       inputs.slab_thickness_front, inputs.step_config)
        for i in range(step_count)
    ]
    if min(treads) <= 0:
        raise InvalidStepTread(
            "Invalid step tread (%.1f cm) after overhang and front slab." % min(treads),
            field="step_tread",
        )

    steps = tuple(
        StepDimension(
            height=first_step_height if i == 0 else regular_step_height,
            tread=treads[i],
            is_first=i == 0,
        )
        for i in range(step_count)
    )
    total_length = sum(treads)

    logger.debug(
        "Planned %d steps: first %.2f cm, regular %.2f cm, length %.2f cm",
        step_count, first_step_height, regular_step_height, total_length,
    )
    return StepPlan(
        steps=steps,
        step_count=step_count,
        total_length=total_length,
        regular_step_height=regular_step_height,
        first_step_height=first_step_height,
        actual_step_width=actual_step_width,
        total_width=inputs.total_width,
    )


def _round_half_up(value: float) -> float:
    # round() is banker's rounding; step counts round .5 up
    return math.floor(value + 0.5)


def step_rows(plan: StepPlan) -> List[dict]:
    """Step dimensions as plain dicts for API output."""
    return [
        {"step": i + 1, "height": round(s.height, 2), "tread": round(s.tread, 2), "is_first": s.is_first}
        for i, s in enumerate(plan.steps)
    ]
