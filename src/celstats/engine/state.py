"""
Aggregation state: the single mutable accumulator threaded through the engine.

Responsibilities
- Hold per-coin portfolio totals, per-coin holder distributions, global stats, loyalty tier
  counts, and the per-account interest list.
- Provide read-or-create accessors so the reducer never branches on "first time seen".

Lifecycle
- Created empty, mutated once per row by celstats.engine.reduce.apply_row, then transformed
  in place once by celstats.engine.finalize.finalize. Nothing is ever removed; distributions
  are truncated during finalization.

Notes
- Sums are Decimal; counts are int. Formatting to report strings happens in
  celstats.engine.report.
- Distribution balances keep the extract's original string so the report echoes it verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from celstats.core.errors import UnrecognizedTierWarning
from celstats.core.numeric import ZERO
from celstats.core.symbols import LoyaltyTier

__all__ = [
    "PortfolioEntry",
    "RankingsLevels",
    "LoyaltyTierSummary",
    "Stats",
    "AggregationState",
]

# (account_id, balance as found in the extract)
Holder = tuple[str, str]


@dataclass(slots=True)
class PortfolioEntry:
    """
    Running totals for one coin.

    Attributes:
        total_balance (Decimal): Sum of current balances of holders (held-coin role).
        total_earning_in_cel_count (int): Holders of this coin earning in CEL (held-coin role).
        total_interest_in_coin (Decimal): Interest paid in this coin (interest-coin role).
        total_interest_in_usd (Decimal): USD value of interest paid in this coin (interest-coin role).
        number_of_holders (int): Rows holding this coin (held-coin role).
    """

    total_balance: Decimal = ZERO
    total_earning_in_cel_count: int = 0
    total_interest_in_coin: Decimal = ZERO
    total_interest_in_usd: Decimal = ZERO
    number_of_holders: int = 0


@dataclass(slots=True)
class RankingsLevels:
    """Values at descending offsets 0/10/100/1000/10000 plus the median; "0" when absent."""

    rank_1: str = "0"
    rank_10: str = "0"
    rank_100: str = "0"
    rank_1000: str = "0"
    rank_10000: str = "0"
    median: str = "0"


@dataclass(slots=True)
class LoyaltyTierSummary:
    platinum: int = 0
    gold: int = 0
    silver: int = 0
    bronze: int = 0
    none: int = 0

    def increment(self, tier: LoyaltyTier) -> None:
        setattr(self, tier.value, getattr(self, tier.value) + 1)


@dataclass(slots=True)
class Stats:
    """
    Global statistics.

    Notes:
        The two averages stay None until finalization.
    """

    total_users: int = 0
    total_users_earning_in_cel: int = 0
    maximum_portfolio_size: int = 0
    total_interest_paid_in_usd: Decimal = ZERO
    average_number_of_coins_per_user: Decimal | None = None
    total_portfolio_coin_positions: int = 0
    max_interest_earned: Decimal = ZERO
    average_interest_per_user: Decimal | None = None


@dataclass
class AggregationState:
    """
    Everything the engine accumulates for one weekly extract.

    Attributes:
        portfolio (dict[str, PortfolioEntry]): Per-coin totals keyed by canonical symbol.
        coin_distributions (dict[str, list[Holder]]): Per-coin (account_id, balance) in row
            order; sorted descending and truncated by the finalizer.
        coin_distribution_levels (dict[str, RankingsLevels]): Filled by the finalizer.
        interest_earned_rankings (RankingsLevels): Filled by the finalizer.
        loyalty_tier_summary (LoyaltyTierSummary): Accounts per tier.
        stats (Stats): Global statistics.
        interest_earned_per_user (list[Decimal]): USD interest of each applied row, in row order.
        warnings (list[UnrecognizedTierWarning]): Recoverable conditions met while reducing.
        finalized (bool): True once the finalizer has run.
    """

    portfolio: dict[str, PortfolioEntry] = field(default_factory=dict)
    coin_distributions: dict[str, list[Holder]] = field(default_factory=dict)
    coin_distribution_levels: dict[str, RankingsLevels] = field(default_factory=dict)
    interest_earned_rankings: RankingsLevels = field(default_factory=RankingsLevels)
    loyalty_tier_summary: LoyaltyTierSummary = field(default_factory=LoyaltyTierSummary)
    stats: Stats = field(default_factory=Stats)
    interest_earned_per_user: list[Decimal] = field(default_factory=list)
    warnings: list[UnrecognizedTierWarning] = field(default_factory=list)
    finalized: bool = False

    def entry(self, coin: str) -> PortfolioEntry:
        """Return the portfolio entry for coin, creating a zeroed one if unseen."""
        e = self.portfolio.get(coin)
        if e is None:
            e = self.portfolio[coin] = PortfolioEntry()
        return e

    def distribution(self, coin: str) -> list[Holder]:
        """Return the holder list for coin, creating an empty one if unseen."""
        return self.coin_distributions.setdefault(coin, [])
