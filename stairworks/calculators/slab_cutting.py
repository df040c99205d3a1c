"""
Slab cutting — plans finishing slabs for every tread and step front.

Steps are processed bottom to top, tread before front. Each location first
tries to cover its area with off-cuts left by earlier locations; only when
the waste policy finds nothing are new sheets cut. Every cut sheet feeds its
usable off-cuts back into the inventory, so the plan depends on step order:
later steps can reuse earlier waste, never the other way round.

Widths run across the stair, depths run front-to-back on a tread and
bottom-to-top on a front. All lengths in centimeters; the slab joint gap is
given in millimeters.
"""

import enum
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .errors import InvalidSlabConfiguration
from .stair_geometry import StepDimension
from .waste_inventory import (
    CUT_TOLERANCE_CM,
    SmallestFirstPolicy,
    WasteInventory,
    WastePiece,
    WasteSelectionPolicy,
    WasteUse,
    cut_remainders,
    needs_cut,
    remainder_source,
)

logger = logging.getLogger(__name__)

_EPS = 1e-9
SIDE_OVERHANG_NOTE = " [Cut due to side overhang]"


class Placement(str, enum.Enum):
    LONG_WAY = "longWay"     # longer stock side across the stair
    SIDE_WAYS = "sideWays"   # shorter stock side across the stair


class CutPolicy(str, enum.Enum):
    ONE_CUT = "oneCut"       # full sheets + one trimmed sheet
    TWO_CUTS = "twoCuts"     # full sheets + two equal trimmed sheets, one per end


class Location(str, enum.Enum):
    TREAD = "tread"
    FRONT = "front"


@dataclass(frozen=True)
class SlabSize:
    size: str
    width: float
    length: float

    def oriented(self, placement: Placement) -> Tuple[float, float]:
        """(width across the stair, depth) for a placement."""
        long_side, short_side = max(self.width, self.length), min(self.width, self.length)
        if placement == Placement.LONG_WAY:
            return long_side, short_side
        return short_side, long_side


SLAB_SIZES: Dict[str, SlabSize] = {
    "90x60": SlabSize("90x60", 90, 60),
    "60x60": SlabSize("60x60", 60, 60),
    "60x30": SlabSize("60x30", 60, 30),
    "30x30": SlabSize("30x30", 30, 30),
}

GAP_OPTIONS_MM = (2, 3, 4, 5)


@dataclass(frozen=True)
class Overhangs:
    """Side overhang of the front slabs, trimmed on each built side."""
    side: float = 0.0
    left: bool = True
    right: bool = True

    def trims(self) -> Tuple[float, float]:
        return (self.side if self.left else 0.0, self.side if self.right else 0.0)


@dataclass(frozen=True)
class PlacedSlab:
    width: float
    depth: float
    from_waste: bool = False
    source: str = ""
    rotated: bool = False

    def as_dict(self) -> dict:
        return {
            "width": round(self.width, 2),
            "depth": round(self.depth, 2),
            "from_waste": self.from_waste,
            "source": self.source,
            "rotated": self.rotated,
        }


@dataclass
class SlabPlacementResult:
    location: Location
    units_needed: int            # new sheets only
    dimension_description: str
    waste_used: bool
    waste_source: str
    pieces: List[PlacedSlab]
    cuts: int
    needs_cutting: bool
    cut_length: float
    required_width: float
    required_depth: float
    gap: float

    @property
    def covered_width(self) -> float:
        """Width laid, joints included."""
        if not self.pieces:
            return 0.0
        return sum(p.width for p in self.pieces) + (len(self.pieces) - 1) * self.gap

    @property
    def reused_pieces(self) -> int:
        return sum(1 for p in self.pieces if p.from_waste)

    def as_dict(self) -> dict:
        return {
            "location": self.location.value,
            "units_needed": self.units_needed,
            "dimensions": self.dimension_description,
            "waste_used": self.waste_used,
            "waste_source": self.waste_source,
            "needs_cutting": self.needs_cutting,
            "cut_length": round(self.cut_length, 2),
            "cuts": self.cuts,
            "pieces": [p.as_dict() for p in self.pieces],
        }


@dataclass
class StepSlabResult:
    step: int
    tread: SlabPlacementResult
    front: SlabPlacementResult
    total_width: float
    front_width: float

    def as_dict(self) -> dict:
        return {
            "step": self.step,
            "tread": self.tread.as_dict(),
            "front": self.front.as_dict(),
            "total_width": round(self.total_width, 2),
            "front_width": round(self.front_width, 2),
        }


@dataclass
class SlabPlan:
    slab: SlabSize
    placement: Placement
    policy: CutPolicy
    gap_mm: float
    steps: List[StepSlabResult] = field(default_factory=list)
    total_step_slabs: int = 0
    total_front_slabs: int = 0
    total_cuts: int = 0
    waste: List[WastePiece] = field(default_factory=list)

    @property
    def total_slabs(self) -> int:
        return self.total_step_slabs + self.total_front_slabs

    def as_dict(self) -> dict:
        return {
            "slab_size": self.slab.size,
            "placement": self.placement.value,
            "cutting": self.policy.value,
            "gap_mm": self.gap_mm,
            "steps": [s.as_dict() for s in self.steps],
            "total_step_slabs": self.total_step_slabs,
            "total_front_slabs": self.total_front_slabs,
            "total_slabs": self.total_slabs,
            "total_cuts": self.total_cuts,
            "waste_available": [w.as_dict() for w in self.waste],
        }


def plan_slab_cutting(steps, total_width, slab="90x60", placement=Placement.LONG_WAY,
                      gap_mm=2.0, policy=CutPolicy.ONE_CUT, overhangs=None,
                      waste_policy=None):
    # type: (Sequence[StepDimension], float, Union[str, SlabSize], Union[str, Placement], float, Union[str, CutPolicy], Optional[Overhangs], Optional[WasteSelectionPolicy]) -> SlabPlan
    """
    Plan slabs for all steps, starting from an empty waste inventory.

    Raises InvalidSlabConfiguration before planning anything if the slab
    stock cannot cover the steps as configured.
    """
    planner = SlabCuttingPlanner(
        total_width=total_width,
        slab=slab,
        placement=placement,
        gap_mm=gap_mm,
        policy=policy,
        overhangs=overhangs,
        waste_policy=waste_policy,
    )
    return planner.plan(steps)


class SlabCuttingPlanner:
    """
    One planning run. Holds the waste inventory and cut counter that are
    threaded through the step loop; do not share an instance between runs.
    """

    def __init__(self, total_width, slab="90x60", placement=Placement.LONG_WAY,
                 gap_mm=2.0, policy=CutPolicy.ONE_CUT, overhangs=None, waste_policy=None):
        self.slab = _resolve_slab(slab)
        self.placement = _resolve_enum(Placement, placement, "slab_placement")
        self.policy = _resolve_enum(CutPolicy, policy, "slab_cutting")
        self.overhangs = overhangs or Overhangs()
        self.waste_policy = waste_policy or SmallestFirstPolicy()

        if total_width is None or total_width <= 0:
            raise InvalidSlabConfiguration("Total width must be greater than zero.", field="total_width")
        if gap_mm is None or gap_mm < 0:
            raise InvalidSlabConfiguration("Slab gap cannot be negative.", field="slab_gap_mm")

        self.total_width = float(total_width)
        self.gap_mm = float(gap_mm)
        self.gap = self.gap_mm / 10.0
        self.sheet_width, self.sheet_depth = self.slab.oriented(self.placement)

        left_trim, right_trim = self.overhangs.trims()
        self.front_width = self.total_width - left_trim - right_trim
        if self.front_width <= 0:
            raise InvalidSlabConfiguration("Side overhang leaves no front to cover.", field="overhang_side")

        self.inventory = WasteInventory()
        self.total_cuts = 0

    def plan(self, steps: Sequence[StepDimension]) -> SlabPlan:
        self._check_depths(steps)

        plan = SlabPlan(slab=self.slab, placement=self.placement,
                        policy=self.policy, gap_mm=self.gap_mm)
        left_trim, right_trim = self.overhangs.trims()

        for index, step in enumerate(steps):
            number = index + 1
            tread = self._place(number, Location.TREAD, step.tread, 0.0, 0.0)
            front = self._place(number, Location.FRONT, step.height, left_trim, right_trim)
            plan.total_step_slabs += tread.units_needed
            plan.total_front_slabs += front.units_needed
            plan.steps.append(StepSlabResult(
                step=number,
                tread=tread,
                front=front,
                total_width=self.total_width,
                front_width=self.front_width,
            ))

        plan.total_cuts = self.total_cuts
        plan.waste = self.inventory.pieces()
        logger.debug(
            "Slab plan %s %s: %d tread + %d front sheets, %d cuts, %d off-cuts left",
            self.slab.size, self.placement.value, plan.total_step_slabs,
            plan.total_front_slabs, plan.total_cuts, len(plan.waste),
        )
        return plan

    def _check_depths(self, steps):
        for index, step in enumerate(steps):
            for location, depth in ((Location.TREAD, step.tread), (Location.FRONT, step.height)):
                if depth <= 0:
                    raise InvalidSlabConfiguration(
                        "Step %d %s depth must be greater than zero." % (index + 1, location.value),
                        field="steps",
                    )
                if depth > self.sheet_depth + _EPS:
                    raise InvalidSlabConfiguration(
                        "Step %d %s needs %.1f cm but %s slabs laid %s are only %.1f cm deep." % (
                            index + 1, location.value, depth, self.slab.size,
                            self.placement.value, self.sheet_depth),
                        field="slab_size",
                    )

    def _place(self, step_number, location, depth, left_trim, right_trim):
        # type: (int, Location, float, float, float) -> SlabPlacementResult
        coverage = self.total_width - left_trim - right_trim
        uses = self.waste_policy.select(self.inventory, coverage, depth, self.gap)
        if uses:
            return self._place_from_waste(location, coverage, depth, uses)
        return self._place_new_sheets(step_number, location, depth, left_trim, right_trim)

    # --- Reusing off-cuts ---

    def _place_from_waste(self, location, coverage, depth, uses):
        # type: (Location, float, float, List[WasteUse]) -> SlabPlacementResult
        pieces = []
        cuts = 0
        for use in uses:
            self.inventory.take(use.index)
            if needs_cut(use.span, use.used_width):
                cuts += 1
            if needs_cut(use.depth, depth):
                cuts += 1
            for remainder in cut_remainders(use.span, use.depth, use.used_width, depth,
                                            remainder_source(use.piece.source),
                                            use.piece.can_be_rotated):
                self.inventory.add(remainder)
            pieces.append(PlacedSlab(use.used_width, depth, from_waste=True,
                                     source=use.piece.source, rotated=use.rotated))

        self.total_cuts += cuts
        waste_source = " and ".join(use.piece.source for use in uses)
        label = "rotated waste" if any(use.rotated for use in uses) else "waste"
        description = "%s [Using %s from %s]" % (_describe(pieces), label, waste_source)
        logger.debug("%s reuses %d off-cut(s) from %s", location.value, len(uses), waste_source)

        return SlabPlacementResult(
            location=location,
            units_needed=0,
            dimension_description=description,
            waste_used=True,
            waste_source=waste_source,
            pieces=pieces,
            cuts=cuts,
            needs_cutting=cuts > 0,
            cut_length=min(p.width for p in pieces),
            required_width=coverage,
            required_depth=depth,
            gap=self.gap,
        )

    # --- Cutting new sheets ---

    def _place_new_sheets(self, step_number, location, depth, left_trim, right_trim):
        # type: (int, Location, float, float, float) -> SlabPlacementResult
        widths = self._sheet_widths(self.total_width)
        widths, overhang_cut = self._trim_edges(widths, left_trim, right_trim)

        source = "Step %d" % step_number
        cuts = 0
        for width in widths:
            if needs_cut(self.sheet_width, width):
                cuts += 1
            if needs_cut(self.sheet_depth, depth):
                cuts += 1
            for remainder in cut_remainders(self.sheet_width, self.sheet_depth, width, depth, source):
                self.inventory.add(remainder)
        self.total_cuts += cuts

        pieces = [PlacedSlab(width, depth) for width in widths]
        cut_widths = [w for w in widths if needs_cut(self.sheet_width, w)]
        description = _describe(pieces)
        if overhang_cut:
            description += SIDE_OVERHANG_NOTE

        return SlabPlacementResult(
            location=location,
            units_needed=len(widths),
            dimension_description=description,
            waste_used=False,
            waste_source="",
            pieces=pieces,
            cuts=cuts,
            needs_cutting=bool(cut_widths),
            cut_length=cut_widths[-1] if cut_widths else 0.0,
            required_width=self.total_width - left_trim - right_trim,
            required_depth=depth,
            gap=self.gap,
        )

    def _sheet_widths(self, span: float) -> List[float]:
        """Widths of the sheets laid across `span`, left to right, before side trims."""
        sheet = self.sheet_width
        count = max(1, int(math.ceil(span / sheet - _EPS)))
        total_gaps = (count - 1) * self.gap

        if count * sheet + total_gaps - span <= CUT_TOLERANCE_CM:
            return [sheet] * count

        if self.policy == CutPolicy.TWO_CUTS and count > 1:
            full = count - 2
            half = (span - full * sheet - total_gaps) / 2.0
            return [half] + [sheet] * full + [half]

        full = count - 1
        remaining = span - full * sheet - total_gaps
        if remaining <= CUT_TOLERANCE_CM:
            # last sheet would be thinner than a cut, the joints take it up
            return [sheet] * full
        return [sheet] * full + [remaining]

    def _trim_edges(self, widths, left_trim, right_trim):
        # type: (List[float], float, float) -> Tuple[List[float], bool]
        """
        Take the side overhang off the outer pieces.

        A piece narrower than the trim is dropped and the rest of the trim
        carries on to its neighbour. Returns the new widths and whether a
        full sheet had to be cut only because of the overhang.
        """
        widths = list(widths)
        overhang_cut = False
        for position, trim in ((0, left_trim), (-1, right_trim)):
            while trim > _EPS and widths:
                width = widths[position]
                if width - trim > CUT_TOLERANCE_CM:
                    if not needs_cut(self.sheet_width, width):
                        overhang_cut = True
                    widths[position] = width - trim
                    trim = 0.0
                else:
                    widths.pop(position)
                    trim -= width + self.gap
        return widths, overhang_cut


def _describe(pieces):
    # type: (Sequence[PlacedSlab]) -> str
    """'2x(90.0x25.0cm) + 1x(9.8x25.0cm)' — grouped by size, widest first."""
    groups = {}  # type: Dict[Tuple[float, float], int]
    for piece in pieces:
        key = (round(piece.width, 1), round(piece.depth, 1))
        groups[key] = groups.get(key, 0) + 1
    parts = [
        "%dx(%.1fx%.1fcm)" % (count, width, depth)
        for (width, depth), count in sorted(groups.items(), key=lambda g: -g[0][0])
    ]
    return " + ".join(parts)


def _resolve_slab(slab):
    # type: (Union[str, SlabSize]) -> SlabSize
    if isinstance(slab, SlabSize):
        return slab
    resolved = SLAB_SIZES.get(str(slab))
    if resolved is None:
        raise InvalidSlabConfiguration(
            "Unknown slab size %r. Available: %s" % (slab, list(SLAB_SIZES.keys())),
            field="slab_size",
        )
    return resolved


def _resolve_enum(enum_cls, value, field_name):
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidSlabConfiguration(
            "Unknown %s %r. Available: %s" % (field_name, value, [e.value for e in enum_cls]),
            field=field_name,
        )
