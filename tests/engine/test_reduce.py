import logging
from decimal import Decimal

import pytest

from celstats.core.errors import DecimalFieldError, UnrecognizedTierWarning
from celstats.core.schema import CoinHolding
from celstats.engine.decode import DecodedRow, decode_line
from celstats.engine.reduce import apply_row
from celstats.engine.state import AggregationState


def holding(
    balance: str = "1",
    *,
    interest_coin: str = "BTC",
    interest_coin_amount: str = "0",
    interest_usd: str = "0",
    earning_in_cel: bool = False,
    tier: str = "GOLD",
) -> CoinHolding:
    return CoinHolding.model_validate(
        {
            "interestCoin": interest_coin,
            "totalInterestInCoin": interest_coin_amount,
            "totalInterestInUsd": interest_usd,
            "earningInterestInCel": earning_in_cel,
            "loyaltyTier": {"title": tier},
            "distributionData": [{"newBalance": "0"}, {"newBalance": balance}],
        }
    )


def row(account_id: str, **holdings: CoinHolding) -> DecodedRow:
    return DecodedRow(account_id=account_id, holdings=dict(holdings))


SCENARIO_LINE = (
    'u1,{"BTC":{"interestCoin":"CEL","totalInterestInCoin":"0.01","totalInterestInUsd":"500",'
    '"earningInterestInCel":false,"loyaltyTier":{"title":"GOLD"},'
    '"distributionData":[{"newBalance":"2.0"}]}}'
)


def test_scenario_row_with_cel_interest() -> None:
    state = AggregationState()
    apply_row(state, decode_line(SCENARIO_LINE))

    btc = state.portfolio["BTC"]
    cel = state.portfolio["CEL"]
    assert btc.total_balance == Decimal("2.0")
    assert btc.number_of_holders == 1
    assert btc.total_earning_in_cel_count == 1
    assert btc.total_interest_in_usd == 0
    assert cel.total_interest_in_usd == Decimal("500")
    assert cel.total_interest_in_coin == Decimal("0.01")
    assert cel.number_of_holders == 0
    assert cel.total_balance == 0
    assert state.stats.total_users_earning_in_cel == 1
    assert state.loyalty_tier_summary.gold == 1
    assert state.coin_distributions == {"BTC": [("u1", "2.0")]}
    assert "CEL" not in state.coin_distributions


def test_vendor_qualified_symbol_updates_canonical_entry() -> None:
    state = AggregationState()
    apply_row(state, row("u1", **{"USDT ERC20": holding("10", interest_coin="USDT ERC20")}))
    assert set(state.portfolio) == {"USDT"}
    assert state.portfolio["USDT"].total_balance == Decimal("10")
    assert state.coin_distributions["USDT"] == [("u1", "10")]


def test_interest_coin_is_normalized_independently() -> None:
    state = AggregationState()
    apply_row(state, row("u1", ETH=holding("1", interest_coin="MCDAI", interest_coin_amount="4")))
    assert state.portfolio["DAI"].total_interest_in_coin == Decimal("4")
    assert state.portfolio["DAI"].number_of_holders == 0
    assert "MCDAI" not in state.portfolio


def test_same_held_and_interest_coin_share_one_entry() -> None:
    state = AggregationState()
    apply_row(
        state,
        row("u1", ETH=holding("3", interest_coin="ETH", interest_coin_amount="0.5", interest_usd="9")),
    )
    apply_row(
        state,
        row("u2", ETH=holding("1", interest_coin="ETH", interest_coin_amount="0.25", interest_usd="1")),
    )
    eth = state.portfolio["ETH"]
    assert eth.total_balance == Decimal("4")
    assert eth.number_of_holders == 2
    assert eth.total_interest_in_coin == Decimal("0.75")
    assert eth.total_interest_in_usd == Decimal("10")


def test_earning_in_cel_flag_is_sticky_within_row() -> None:
    state = AggregationState()
    apply_row(
        state,
        row("u1", BTC=holding(earning_in_cel=True), ETH=holding(interest_coin="ETH")),
    )
    assert state.portfolio["BTC"].total_earning_in_cel_count == 1
    assert state.portfolio["ETH"].total_earning_in_cel_count == 0
    assert state.stats.total_users_earning_in_cel == 1


def test_row_not_earning_in_cel() -> None:
    state = AggregationState()
    apply_row(state, row("u1", BTC=holding()))
    assert state.stats.total_users_earning_in_cel == 0


def test_last_coin_decides_loyalty_tier() -> None:
    state = AggregationState()
    apply_row(state, row("u1", BTC=holding(tier="GOLD"), ETH=holding(tier="SILVER")))
    assert state.loyalty_tier_summary.silver == 1
    assert state.loyalty_tier_summary.gold == 0


def test_unrecognized_tier_is_recoverable(caplog) -> None:
    state = AggregationState()
    with caplog.at_level(logging.WARNING):
        apply_row(state, row("u9", BTC=holding("5", tier="DIAMOND")))
    assert state.stats.total_users == 1
    assert state.portfolio["BTC"].total_balance == Decimal("5")
    tiers = state.loyalty_tier_summary
    assert (tiers.platinum, tiers.gold, tiers.silver, tiers.bronze, tiers.none) == (0, 0, 0, 0, 0)
    assert len(state.warnings) == 1
    assert isinstance(state.warnings[0], UnrecognizedTierWarning)
    assert state.warnings[0].tier == "DIAMOND"
    assert state.warnings[0].account_id == "u9"
    assert "DIAMOND" in caplog.text


def test_row_without_holdings_counts_user_and_warns() -> None:
    state = AggregationState()
    apply_row(state, row("u1"))
    assert state.stats.total_users == 1
    assert state.stats.total_portfolio_coin_positions == 0
    assert state.interest_earned_per_user == [Decimal(0)]
    assert state.warnings[0].tier == ""


def test_global_stats_after_rows() -> None:
    state = AggregationState()
    rows = [
        row("u1", BTC=holding(interest_usd="1.25"), ETH=holding(interest_usd="0.75")),
        row("u2", BTC=holding(interest_usd="5")),
        row("u3", BTC=holding(), ETH=holding(), ADA=holding(interest_usd="0.5")),
    ]
    for r in rows:
        apply_row(state, r)
    stats = state.stats
    assert stats.total_users == 3
    assert stats.total_portfolio_coin_positions == 6
    assert stats.maximum_portfolio_size == 3
    assert stats.total_interest_paid_in_usd == Decimal("7.5")
    assert stats.max_interest_earned == Decimal("5")
    assert state.interest_earned_per_user == [Decimal("2.00"), Decimal("5"), Decimal("0.5")]
    for coin, holders in state.coin_distributions.items():
        assert state.portfolio[coin].number_of_holders == len(holders)


def test_maxima_never_decrease() -> None:
    state = AggregationState()
    sizes = []
    maxima = []
    for i, usd in enumerate(["4", "1", "9", "0", "2"]):
        coins = {f"C{j}": holding(interest_usd=usd) for j in range(5 - i)}
        apply_row(state, row(f"u{i}", **coins))
        sizes.append(state.stats.maximum_portfolio_size)
        maxima.append(state.stats.max_interest_earned)
    assert sizes == sorted(sizes)
    assert maxima == sorted(maxima)


def test_bad_decimal_leaves_state_untouched() -> None:
    state = AggregationState()
    bad = row("u1", BTC=holding("2"), ETH=holding("not-a-number"))
    with pytest.raises(DecimalFieldError) as ei:
        apply_row(state, bad)
    assert ei.value.field == "newBalance"
    assert state.portfolio == {}
    assert state.coin_distributions == {}
    assert state.stats.total_users == 0
    assert state.interest_earned_per_user == []


def test_empty_balance_history_is_fatal() -> None:
    h = holding()
    h.distribution_data.clear()
    with pytest.raises(DecimalFieldError):
        apply_row(AggregationState(), row("u1", BTC=h))
