"""
Off-cut inventory for slab cutting.

Pieces are stored by index in insertion order, so taking one out is a
dict pop rather than a value-equality search. Identical pieces from the same
step are legal and kept as separate entries.

Which pieces get reused is decided by a WasteSelectionPolicy. The default
SmallestFirstPolicy is a greedy first-fit: smallest sufficient piece first,
then a pair of pieces side by side. It is not an optimal cutting-stock solver.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

MIN_WASTE_DIMENSION_CM = 5.0   # narrower off-cuts are scrap
CUT_TOLERANCE_CM = 0.1
_EPS = 1e-9


def needs_cut(actual: float, required: float) -> bool:
    return abs(actual - required) > CUT_TOLERANCE_CM


@dataclass(frozen=True)
class WastePiece:
    """
    A reusable off-cut.

    Laid normally, `width` runs along the width being covered and `length`
    along the depth. Rotated, the two swap.
    """
    width: float
    length: float
    source: str
    can_be_rotated: bool = True

    @property
    def area(self) -> float:
        return self.width * self.length

    def orientation_covering(self, width: float, depth: float) -> Optional[bool]:
        """False for normal, True for rotated, None if it cannot cover width x depth."""
        if self.width >= width - _EPS and self.length >= depth - _EPS:
            return False
        if self.can_be_rotated and self.length >= width - _EPS and self.width >= depth - _EPS:
            return True
        return None

    def span_for_depth(self, depth: float) -> Optional[Tuple[float, bool]]:
        """Widest span this piece covers at `depth`, and whether it is rotated."""
        spans = []
        if self.length >= depth - _EPS:
            spans.append((self.width, False))
        if self.can_be_rotated and self.width >= depth - _EPS:
            spans.append((self.length, True))
        if not spans:
            return None
        return max(spans, key=lambda s: s[0])

    def as_dict(self) -> dict:
        return {
            "width": round(self.width, 2),
            "length": round(self.length, 2),
            "source": self.source,
            "can_be_rotated": self.can_be_rotated,
        }


@dataclass(frozen=True)
class WasteUse:
    """A piece chosen for reuse, as placed."""
    index: int
    piece: WastePiece
    rotated: bool
    used_width: float

    @property
    def span(self) -> float:
        return self.piece.length if self.rotated else self.piece.width

    @property
    def depth(self) -> float:
        return self.piece.width if self.rotated else self.piece.length


class WasteInventory:
    """Indexed arena of WastePiece, owned by one planning run."""

    def __init__(self, pieces=()):
        self._pieces = {}  # type: Dict[int, WastePiece]
        self._next_index = 0
        for piece in pieces:
            self.add(piece)

    def add(self, piece: WastePiece) -> int:
        index = self._next_index
        self._pieces[index] = piece
        self._next_index += 1
        return index

    def take(self, index: int) -> WastePiece:
        """Remove and return the piece at `index`. KeyError if already taken."""
        return self._pieces.pop(index)

    def take_matching(self, predicate: Callable[[WastePiece], bool]) -> Optional[Tuple[int, WastePiece]]:
        """Remove and return the oldest piece matching `predicate`."""
        for index, piece in self._pieces.items():
            if predicate(piece):
                del self._pieces[index]
                return index, piece
        return None

    def items(self) -> List[Tuple[int, WastePiece]]:
        return list(self._pieces.items())

    def pieces(self) -> List[WastePiece]:
        return list(self._pieces.values())

    def __len__(self) -> int:
        return len(self._pieces)

    def __iter__(self) -> Iterator[WastePiece]:
        return iter(self.pieces())


class WasteSelectionPolicy(ABC):
    """Decides which inventory pieces cover a width x depth area, if any."""

    @abstractmethod
    def select(self, inventory, coverage_width, depth, gap):
        # type: (WasteInventory, float, float, float) -> Optional[List[WasteUse]]
        """
        Return the pieces to use, left to right, or None.

        Must not modify the inventory — the planner takes the chosen pieces.
        Pieces laid side by side are separated by `gap`.
        """


class SmallestFirstPolicy(WasteSelectionPolicy):
    """One piece if any covers alone, else two side by side. Smallest area first."""

    def select(self, inventory, coverage_width, depth, gap):
        ranked = sorted(inventory.items(), key=lambda item: item[1].area)

        for index, piece in ranked:
            rotated = piece.orientation_covering(coverage_width, depth)
            if rotated is not None:
                return [WasteUse(index, piece, rotated, coverage_width)]

        for index, piece in ranked:
            fit = piece.span_for_depth(depth)
            if fit is None:
                continue
            span, rotated = fit
            rest = coverage_width - span - gap
            if rest <= CUT_TOLERANCE_CM:
                continue
            for other_index, other in ranked:
                if other_index == index:
                    continue
                other_rotated = other.orientation_covering(rest, depth)
                if other_rotated is not None:
                    return [
                        WasteUse(index, piece, rotated, span),
                        WasteUse(other_index, other, other_rotated, rest),
                    ]
        return None


def remainder_source(source: str) -> str:
    if source.startswith("Remaining from "):
        return source
    return "Remaining from %s" % source


def cut_remainders(span, depth, used_width, used_depth, source, can_be_rotated=True):
    # type: (float, float, float, float, str, bool) -> List[WastePiece]
    """
    Off-cuts left after cutting a span x depth piece down to used_width x used_depth.

    The depth cut comes first and leaves a full-span strip; the width cut
    then leaves the side piece at the used depth. Only pieces at least
    MIN_WASTE_DIMENSION_CM on both sides are kept.
    """
    remainders = [
        WastePiece(span, depth - used_depth, source, can_be_rotated),
        WastePiece(span - used_width, used_depth, source, can_be_rotated),
    ]
    return [
        r for r in remainders
        if r.width >= MIN_WASTE_DIMENSION_CM - _EPS and r.length >= MIN_WASTE_DIMENSION_CM - _EPS
    ]
