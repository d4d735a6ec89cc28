"""
celstats.engine: Rewards aggregation engine.

## Responsibilities
- Decode extract lines into typed rows (decode).
- Apply rows to a single owned AggregationState with exact decimal sums (reduce, state).
- Derive averages, rank levels, and top-holder distributions once the stream ends (finalize).
- Render the finalized state as a RewardsReport (report).

## Public API
- RewardsEngine: lifecycle-enforcing facade: apply_line/apply_row, then finalize.
- AggregationState: the accumulator, usable directly with apply_row/finalize in tests.

## Import DAG discipline
- Depends on stdlib, pydantic, polars, and celstats.core.*.
- MUST NOT import celstats.io or the CLI.
"""

from __future__ import annotations

from .decode import DecodedRow, decode_line
from .engine import RewardsEngine
from .state import AggregationState

__all__ = [
    "AggregationState",
    "DecodedRow",
    "RewardsEngine",
    "decode_line",
]
