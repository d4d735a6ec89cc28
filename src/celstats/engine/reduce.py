"""
Row reducer: applies one decoded row to the aggregation state.

Overview
- Every numeric field of the row is parsed before the state is touched, so a row is either
  applied in full or not at all.
- Each holding contributes in two roles: the held coin gets balance, holder count, and the
  earn-in-CEL count; the interest coin gets the interest totals. Both symbols are normalized
  independently and may name the same portfolio entry.
- A holding counts as earning in CEL when its flag is set or its interest is paid in CEL. The
  row-level flag is sticky once set.
- The row's loyalty tier is the tier of the last holding in payload order.

Failure semantics
- DecimalFieldError for a non-numeric field or a holding without balance history (fatal).
- UnrecognizedTierWarning for an unknown tier label: logged, collected on the state, and the
  tier increment skipped; the rest of the row still applies.
"""

from __future__ import annotations

import logging
from decimal import Context, Decimal
from typing import NamedTuple

from celstats.core.constants import CEL_SYMBOL
from celstats.core.errors import DecimalFieldError, UnrecognizedTierWarning
from celstats.core.numeric import ZERO, make_context, parse_decimal
from celstats.core.schema import CoinHolding
from celstats.core.symbols import normalize_symbol, tier_from_title

from .decode import DecodedRow
from .state import AggregationState

__all__ = [
    "apply_row",
]

logger = logging.getLogger(__name__)


class _Contribution(NamedTuple):
    coin: str
    interest_coin: str
    balance_text: str
    balance: Decimal
    interest_in_coin: Decimal
    interest_in_usd: Decimal
    earns_in_cel: bool
    tier_title: str


def _contribution(symbol: str, holding: CoinHolding) -> _Contribution:
    coin = normalize_symbol(symbol)
    interest_coin = normalize_symbol(holding.interest_coin)
    balance_text = holding.current_balance
    if balance_text is None:
        raise DecimalFieldError("distributionData", [], coin=symbol)
    return _Contribution(
        coin=coin,
        interest_coin=interest_coin,
        balance_text=balance_text,
        balance=parse_decimal(balance_text, "newBalance", coin=symbol),
        interest_in_coin=parse_decimal(
            holding.total_interest_in_coin, "totalInterestInCoin", coin=symbol
        ),
        interest_in_usd=parse_decimal(
            holding.total_interest_in_usd, "totalInterestInUsd", coin=symbol
        ),
        earns_in_cel=holding.earning_interest_in_cel or interest_coin == CEL_SYMBOL,
        tier_title=holding.loyalty_tier.title,
    )


def apply_row(state: AggregationState, row: DecodedRow, ctx: Context | None = None) -> None:
    """
    Update state with one account row.

    Args:
        state (AggregationState): Accumulator to mutate (must not be finalized).
        row (DecodedRow): Decoded account row.
        ctx (Context | None): Decimal context for sums (default precision from constants).

    Raises:
        DecimalFieldError: If any numeric field of the row is invalid. State is unchanged.
    """
    ctx = ctx or make_context()
    contributions = [_contribution(symbol, h) for symbol, h in row.holdings.items()]

    tier = ""
    is_earning_in_cel = False
    interest_per_user = ZERO
    stats = state.stats

    for c in contributions:
        interest_per_user = ctx.add(interest_per_user, c.interest_in_usd)

        holders = state.distribution(c.coin)
        held = state.entry(c.coin)
        paid = state.entry(c.interest_coin)

        held.total_balance = ctx.add(held.total_balance, c.balance)
        held.number_of_holders += 1
        paid.total_interest_in_coin = ctx.add(paid.total_interest_in_coin, c.interest_in_coin)
        paid.total_interest_in_usd = ctx.add(paid.total_interest_in_usd, c.interest_in_usd)

        holders.append((row.account_id, c.balance_text))

        if c.earns_in_cel:
            held.total_earning_in_cel_count += 1
            is_earning_in_cel = True

        stats.total_interest_paid_in_usd = ctx.add(
            stats.total_interest_paid_in_usd, c.interest_in_usd
        )
        tier = c.tier_title

    size = len(contributions)
    state.interest_earned_per_user.append(interest_per_user)
    stats.max_interest_earned = max(stats.max_interest_earned, interest_per_user)
    stats.total_users += 1
    stats.total_portfolio_coin_positions += size
    stats.maximum_portfolio_size = max(stats.maximum_portfolio_size, size)
    if is_earning_in_cel:
        stats.total_users_earning_in_cel += 1

    resolved = tier_from_title(tier)
    if resolved is None:
        warning = UnrecognizedTierWarning(tier, row.account_id)
        state.warnings.append(warning)
        logger.warning(str(warning))
    else:
        state.loyalty_tier_summary.increment(resolved)
