"""Streaming cardinality sketches.

This package provides a HyperLogLog distinct-count estimator and the pieces
it is built from. All of it shares common properties:
- Bounded memory usage (fixed at construction)
- Single-pass processing (add keys one at a time)
- Deterministic (no seeds, no per-process hash salt)

Quick Reference:
    HyperLogLog: Cardinality (distinct count) estimation
    RegisterArray: Fixed-size monotone register store
    one_at_a_time_hash: 32-bit string hash used to place keys

Example:
    from hllcount.sketching import HyperLogLog

    hll = HyperLogLog(precision=14)
    for visitor_id in visitors:
        hll.update(visitor_id)
    print(f"~{int(hll.estimate())} unique visitors")
"""

# Base protocols
from hllcount.sketching.base import CardinalitySketch, Sketch

# Hashing
from hllcount.sketching.hashing import leading_zeros32, one_at_a_time_hash

# Cardinality estimation
from hllcount.sketching.hyperloglog import (
    EstimateRegime,
    HyperLogLog,
    alpha_m,
    estimate_cardinality,
    max_rank,
    select_regime,
)
from hllcount.sketching.registers import RegisterArray

__all__ = [
    # Protocols
    "CardinalitySketch",
    "Sketch",
    # Cardinality estimation
    "EstimateRegime",
    "HyperLogLog",
    "RegisterArray",
    "alpha_m",
    "estimate_cardinality",
    "max_rank",
    "select_regime",
    # Hashing
    "leading_zeros32",
    "one_at_a_time_hash",
]
