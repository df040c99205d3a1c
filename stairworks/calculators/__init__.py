"""
Deterministic stair estimating engine.

Pure Python math, no database access except the optional price lookup.
Given stair measurements, produce step geometry, masonry courses and unit
counts, and a slab cutting plan that reuses off-cuts.
"""
