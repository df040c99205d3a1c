"""
Waste inventory and selection policy tests.

Tests:
1-3.  Inventory arena: indices, duplicates, take
4-5.  Piece orientation and usable span
6-9.  SmallestFirstPolicy: single piece, pair, nothing, no mutation
10-11. Off-cut geometry and naming
"""

import pytest

from stairworks.calculators.waste_inventory import (
    SmallestFirstPolicy,
    WasteInventory,
    WastePiece,
    cut_remainders,
    needs_cut,
    remainder_source,
)


# ============================================================
# Inventory
# ============================================================

def test_indices_follow_insertion_order():
    inventory = WasteInventory()
    assert inventory.add(WastePiece(80, 30, "Step 1")) == 0
    assert inventory.add(WastePiece(40, 30, "Step 1")) == 1
    assert [i for i, _ in inventory.items()] == [0, 1]


def test_identical_pieces_are_separate_entries():
    """Taking one of two equal off-cuts must leave the other."""
    inventory = WasteInventory([WastePiece(90, 35, "Step 1"), WastePiece(90, 35, "Step 1")])
    assert len(inventory) == 2
    inventory.take(0)
    assert len(inventory) == 1
    with pytest.raises(KeyError):
        inventory.take(0)
    assert inventory.pieces() == [WastePiece(90, 35, "Step 1")]


def test_take_matching_returns_oldest():
    inventory = WasteInventory([WastePiece(10, 10, "a"), WastePiece(50, 10, "b"), WastePiece(60, 10, "c")])
    index, piece = inventory.take_matching(lambda p: p.width >= 50)
    assert index == 1
    assert piece.source == "b"
    assert inventory.take_matching(lambda p: p.width > 100) is None


# ============================================================
# Piece geometry
# ============================================================

def test_orientation_covering():
    piece = WastePiece(80, 30, "Step 1")
    assert piece.orientation_covering(70, 25) is False
    assert piece.orientation_covering(25, 70) is True
    assert piece.orientation_covering(90, 25) is None
    assert WastePiece(80, 30, "x", can_be_rotated=False).orientation_covering(25, 70) is None


def test_span_for_depth_prefers_widest():
    piece = WastePiece(80, 30, "Step 1")
    assert piece.span_for_depth(25) == (80, False)
    assert piece.span_for_depth(50) == (30, True)
    assert piece.span_for_depth(90) is None


# ============================================================
# Selection policy
# ============================================================

def test_smallest_single_piece_first():
    inventory = WasteInventory([WastePiece(100, 40, "A"), WastePiece(60, 30, "B")])
    uses = SmallestFirstPolicy().select(inventory, 50, 25, 0.2)
    assert len(uses) == 1
    assert uses[0].index == 1
    assert uses[0].used_width == 50
    assert uses[0].rotated is False


def test_pair_side_by_side_with_gap():
    """Neither piece covers 60 cm alone; 30 + 0.2 gap + 29.8 does."""
    inventory = WasteInventory([WastePiece(40, 30, "A"), WastePiece(30, 30, "B")])
    uses = SmallestFirstPolicy().select(inventory, 60, 25, 0.2)
    assert [u.index for u in uses] == [1, 0]
    assert uses[0].used_width == pytest.approx(30)
    assert uses[1].used_width == pytest.approx(29.8)
    assert sum(u.used_width for u in uses) + 0.2 == pytest.approx(60)


def test_nothing_fits():
    inventory = WasteInventory([WastePiece(20, 10, "A"), WastePiece(20, 10, "B")])
    assert SmallestFirstPolicy().select(inventory, 100, 25, 0.2) is None


def test_select_does_not_take_pieces():
    inventory = WasteInventory([WastePiece(100, 40, "A")])
    SmallestFirstPolicy().select(inventory, 50, 25, 0.2)
    assert len(inventory) == 1


# ============================================================
# Off-cuts
# ============================================================

def test_cut_remainders_depth_strip_then_side():
    strip, side = cut_remainders(90, 60, 9.8, 25, "Step 1")
    assert (strip.width, strip.length) == (90, 35)
    assert side.width == pytest.approx(80.2)
    assert side.length == 25
    assert side.source == "Step 1"

    # slivers under 5 cm are scrap
    assert cut_remainders(90, 60, 88, 25, "Step 1") == [WastePiece(90, 35, "Step 1")]
    assert cut_remainders(90, 27, 90, 25, "Step 1") == []


def test_names_and_tolerance():
    assert remainder_source("Step 1") == "Remaining from Step 1"
    assert remainder_source("Remaining from Step 1") == "Remaining from Step 1"
    assert needs_cut(90, 89.95) is False
    assert needs_cut(90, 89.8) is True
