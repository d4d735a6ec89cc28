"""
Finalizer: the one-time pass run after the last row.

Overview
- Averages: coins per user and USD interest per user (20 decimal places, half-up).
- Per coin: stable sort of holders by balance descending, rank levels sampled at offsets
  0/10/100/1000/10000 plus the median, then truncation to the top ``distribution_size``.
- Interest rankings: the per-account USD interest list sorted descending and sampled likewise.

Ordering
- Sort keys are floats parsed from the decimal strings (ordering only; stored values stay
  Decimal or the original strings). Polars sorts with maintain_order=True, so exactly equal
  values keep row order.

Math mapping
| Level        | Descending index |
|--------------|------------------|
| rank_1       | 0                |
| rank_10      | 10               |
| rank_100     | 100              |
| rank_1000    | 1000             |
| rank_10000   | 10000            |
| median       | len // 2         |
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Context, Decimal

import polars as pl

from celstats.core.constants import DISTRIBUTION_SIZE, RANK_OFFSETS
from celstats.core.errors import DegenerateInputError, EngineStateError
from celstats.core.numeric import divide, format_decimal, make_context

from .state import AggregationState, RankingsLevels

__all__ = [
    "descending_order",
    "rank_levels",
    "finalize",
]


def descending_order(values: Sequence[str | Decimal]) -> list[int]:
    """
    Positions of values sorted numerically descending, ties in original order.

    Args:
        values (Sequence[str | Decimal]): Decimal strings or Decimals.

    Returns:
        list[int]: Permutation of range(len(values)).
    """
    if not values:
        return []
    frame = pl.DataFrame(
        {"sort_key": [float(v) for v in values]}, schema={"sort_key": pl.Float64}
    ).with_row_index("position")
    ordered = frame.sort("sort_key", descending=True, maintain_order=True)
    return [int(p) for p in ordered.get_column("position").to_list()]


def rank_levels(ordered: Sequence[str]) -> RankingsLevels:
    """Sample a descending-sorted list of value strings into RankingsLevels."""
    levels = RankingsLevels()
    n = len(ordered)
    for name, offset in RANK_OFFSETS.items():
        if offset < n:
            setattr(levels, name, ordered[offset])
    if n:
        levels.median = ordered[n // 2]
    return levels


def finalize(
    state: AggregationState,
    *,
    distribution_size: int = DISTRIBUTION_SIZE,
    ctx: Context | None = None,
) -> AggregationState:
    """
    Derive averages, rankings, and truncated distributions in place.

    Args:
        state (AggregationState): State after the last row was applied.
        distribution_size (int): Holders kept per coin after ranking.
        ctx (Context | None): Decimal context for the averages.

    Returns:
        AggregationState: The same state, now finalized.

    Raises:
        EngineStateError: If state was already finalized.
        DegenerateInputError: If no rows were applied (total_users == 0).
    """
    if state.finalized:
        raise EngineStateError("aggregation state is already finalized")
    stats = state.stats
    if stats.total_users == 0:
        raise DegenerateInputError("no rows were processed; averages are undefined")
    ctx = ctx or make_context()

    stats.average_number_of_coins_per_user = divide(
        Decimal(stats.total_portfolio_coin_positions), stats.total_users, ctx
    )

    for coin, holders in state.coin_distributions.items():
        order = descending_order([balance for _, balance in holders])
        ranked = [holders[i] for i in order]
        state.coin_distribution_levels[coin] = rank_levels([balance for _, balance in ranked])
        state.coin_distributions[coin] = ranked[:distribution_size]

    interest = state.interest_earned_per_user
    state.interest_earned_rankings = rank_levels(
        [format_decimal(interest[i]) for i in descending_order(interest)]
    )

    stats.average_interest_per_user = divide(stats.total_interest_paid_in_usd, stats.total_users, ctx)
    state.finalized = True
    return state
