"""
Pydantic v2 models for the rewards extract payload and the emitted report.

Responsibilities
- Define the typed CoinHolding record decoded from each row's JSON payload.
- Define the RewardsReport document consumed by the dashboard, with its camelCase wire names.

Style
- Zero-IO (stdlib + pydantic only).
- Input models ignore unknown fields: the extract carries many per-holding fields
  (rates, dates, distribution rules) the engine does not aggregate.
- Decimal quantities stay strings at this layer. Parsing into Decimal happens in the
  reducer so that a bad number surfaces as DecimalFieldError, not a decode failure.

References
- errors: src/celstats/core/errors.py
- reducer: src/celstats/engine/reduce.py
- tests: tests/core/test_schema_payload.py
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    # Extract payload
    "BalanceChange",
    "LoyaltyTierInfo",
    "CoinHolding",
    # Report
    "PortfolioEntryModel",
    "RankingsLevelsModel",
    "LoyaltyTierSummaryModel",
    "StatsModel",
    "RewardsReport",
]

# ============================================================================
# Extract payload
# ============================================================================


class BalanceChange(BaseModel):
    """
    One entry of a holding's distributionData history.

    Attributes:
        new_balance (str): Balance after this entry (wire: newBalance).
        type (str | None): Entry kind, when present.
        date (str | None): Entry date, when present.
        total_interest (str | None): Interest of this entry (wire: totalInterest), when present.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    new_balance: str = Field(alias="newBalance")
    type: str | None = None
    date: str | None = None
    total_interest: str | None = Field(default=None, alias="totalInterest")


class LoyaltyTierInfo(BaseModel):
    """
    Loyalty tier attached to a holding.

    Attributes:
        title (str): Tier label, expected one of PLATINUM/GOLD/SILVER/BRONZE/NONE. Kept
            verbatim so that unknown labels can be reported rather than rejected.
    """

    model_config = ConfigDict(extra="ignore")

    title: str


class CoinHolding(BaseModel):
    """
    Per-coin record within one account row.

    Attributes:
        interest_coin (str): Symbol interest is paid in (wire: interestCoin).
        total_interest_in_coin (str): Interest paid, in interest_coin units.
        total_interest_in_usd (str): Interest paid, in USD.
        earning_interest_in_cel (bool): Flag from the extract; absent means False.
        loyalty_tier (LoyaltyTierInfo): Tier of the account as reported on this holding.
        distribution_data (list[BalanceChange]): Ordered balance history; the last entry
            carries the current balance.
        original_interest_coin (str | None): Interest coin before any conversion, when present.
        distribution_rule_used (str | None): Source distribution rule, when present.

    Examples:
        >>> from celstats.core.schema import CoinHolding
        >>> h = CoinHolding.model_validate({
        ...     "interestCoin": "CEL",
        ...     "totalInterestInCoin": "0.01",
        ...     "totalInterestInUsd": "500",
        ...     "loyaltyTier": {"title": "GOLD"},
        ...     "distributionData": [{"newBalance": "2.0"}],
        ... })
        >>> h.current_balance
        '2.0'
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    interest_coin: str = Field(alias="interestCoin")
    total_interest_in_coin: str = Field(alias="totalInterestInCoin")
    total_interest_in_usd: str = Field(alias="totalInterestInUsd")
    earning_interest_in_cel: bool = Field(default=False, alias="earningInterestInCel")
    loyalty_tier: LoyaltyTierInfo = Field(alias="loyaltyTier")
    distribution_data: list[BalanceChange] = Field(alias="distributionData")
    original_interest_coin: str | None = Field(default=None, alias="originalInterestCoin")
    distribution_rule_used: str | None = Field(default=None, alias="distributionRuleUsed")

    @property
    def current_balance(self) -> str | None:
        """Last newBalance of the history, or None when the history is empty."""
        if not self.distribution_data:
            return None
        return self.distribution_data[-1].new_balance


# ============================================================================
# Report
# ============================================================================


class _ReportModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class PortfolioEntryModel(_ReportModel):
    """Per-coin totals (all values are decimal strings)."""

    total: str = "0"
    total_earn_in_cel: str = Field(default="0", alias="totalEarnInCEL")
    total_interest_in_coin: str = Field(default="0", alias="totalInterestInCoin")
    total_interest_in_usd: str = Field(default="0", alias="totalInterestInUsd")
    number_of_users_holding: str = Field(default="0", alias="numberOfUsersHolding")


class RankingsLevelsModel(_ReportModel):
    """Values sampled at fixed descending ranks, plus the median."""

    top_one: str = Field(default="0", alias="topOne")
    top_ten: str = Field(default="0", alias="topTen")
    top_hundred: str = Field(default="0", alias="topHundred")
    top_thousand: str = Field(default="0", alias="topThousand")
    top_ten_thousand: str = Field(default="0", alias="topTenThousand")
    median_value: str = Field(default="0", alias="medianValue")


class LoyaltyTierSummaryModel(_ReportModel):
    """Number of accounts per loyalty tier."""

    platinum: str = "0"
    gold: str = "0"
    silver: str = "0"
    bronze: str = "0"
    none: str = "0"


class StatsModel(_ReportModel):
    """Global statistics block."""

    total_users: str = Field(default="0", alias="totalUsers")
    total_users_earning_in_cel: str = Field(default="0", alias="totalUsersEarningInCel")
    maximum_portfolio_size: str = Field(default="0", alias="maximumPortfolioSize")
    average_number_of_coins_per_user: str = Field(default="0", alias="averageNumberOfCoinsPerUser")
    total_portfolio_coin_positions: str = Field(default="0", alias="totalPortfolioCoinPositions")
    total_interest_paid_in_usd: str = Field(default="0", alias="totalInterestPaidInUsd")
    max_interest_earned: str = Field(default="0", alias="maxInterestEarned")
    average_interest_per_user: str = Field(default="0", alias="averageInterestPerUser")


class RewardsReport(_ReportModel):
    """
    The weekly report document.

    Attributes:
        portfolio (dict[str, PortfolioEntryModel]): Per-coin totals.
        coin_distributions (dict[str, list[tuple[str, str]]]): Per-coin top holders as
            (account_id, balance), largest first.
        coin_distributions_levels (dict[str, RankingsLevelsModel]): Per-coin balance ranks.
        interest_earned_rankings (RankingsLevelsModel): Ranks of USD interest per account.
        loyalty_tier_summary (LoyaltyTierSummaryModel): Accounts per tier.
        stats (StatsModel): Global statistics.

    Notes:
        Serialize with ``model_dump(by_alias=True)`` to obtain the dashboard wire names.
    """

    portfolio: dict[str, PortfolioEntryModel] = Field(default_factory=dict)
    coin_distributions: dict[str, list[tuple[str, str]]] = Field(
        default_factory=dict, alias="coinDistributions"
    )
    coin_distributions_levels: dict[str, RankingsLevelsModel] = Field(
        default_factory=dict, alias="coinDistributionsLevels"
    )
    interest_earned_rankings: RankingsLevelsModel = Field(
        default_factory=RankingsLevelsModel, alias="interestEarnedRankings"
    )
    loyalty_tier_summary: LoyaltyTierSummaryModel = Field(
        default_factory=LoyaltyTierSummaryModel, alias="loyaltyTierSummary"
    )
    stats: StatsModel = Field(default_factory=StatsModel)
