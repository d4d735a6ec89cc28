"""
Report builder: converts a finalized AggregationState into the RewardsReport document.

All quantities are rendered as strings (decimal sums in plain notation, counts as integers)
because the dashboard consumes them as strings.
"""

from __future__ import annotations

from celstats.core.errors import EngineStateError
from celstats.core.numeric import format_decimal
from celstats.core.schema import (
    LoyaltyTierSummaryModel,
    PortfolioEntryModel,
    RankingsLevelsModel,
    RewardsReport,
    StatsModel,
)

from .state import AggregationState, PortfolioEntry, RankingsLevels

__all__ = [
    "build_report",
]


def _portfolio_entry(e: PortfolioEntry) -> PortfolioEntryModel:
    return PortfolioEntryModel(
        total=format_decimal(e.total_balance),
        total_earn_in_cel=str(e.total_earning_in_cel_count),
        total_interest_in_coin=format_decimal(e.total_interest_in_coin),
        total_interest_in_usd=format_decimal(e.total_interest_in_usd),
        number_of_users_holding=str(e.number_of_holders),
    )


def _levels(levels: RankingsLevels) -> RankingsLevelsModel:
    return RankingsLevelsModel(
        top_one=levels.rank_1,
        top_ten=levels.rank_10,
        top_hundred=levels.rank_100,
        top_thousand=levels.rank_1000,
        top_ten_thousand=levels.rank_10000,
        median_value=levels.median,
    )


def build_report(state: AggregationState) -> RewardsReport:
    """
    Build the report document from a finalized state.

    Raises:
        EngineStateError: If the state has not been finalized.
    """
    if not state.finalized:
        raise EngineStateError("report requested before finalization")
    stats = state.stats
    tiers = state.loyalty_tier_summary
    return RewardsReport(
        portfolio={coin: _portfolio_entry(e) for coin, e in state.portfolio.items()},
        coin_distributions={coin: list(h) for coin, h in state.coin_distributions.items()},
        coin_distributions_levels={
            coin: _levels(lv) for coin, lv in state.coin_distribution_levels.items()
        },
        interest_earned_rankings=_levels(state.interest_earned_rankings),
        loyalty_tier_summary=LoyaltyTierSummaryModel(
            platinum=str(tiers.platinum),
            gold=str(tiers.gold),
            silver=str(tiers.silver),
            bronze=str(tiers.bronze),
            none=str(tiers.none),
        ),
        stats=StatsModel(
            total_users=str(stats.total_users),
            total_users_earning_in_cel=str(stats.total_users_earning_in_cel),
            maximum_portfolio_size=str(stats.maximum_portfolio_size),
            average_number_of_coins_per_user=format_decimal(
                stats.average_number_of_coins_per_user or 0
            ),
            total_portfolio_coin_positions=str(stats.total_portfolio_coin_positions),
            total_interest_paid_in_usd=format_decimal(stats.total_interest_paid_in_usd),
            max_interest_earned=format_decimal(stats.max_interest_earned),
            average_interest_per_user=format_decimal(stats.average_interest_per_user or 0),
        ),
    )
