from decimal import Decimal

import pytest

from celstats.core.errors import DegenerateInputError, EngineStateError
from celstats.core.schema import CoinHolding
from celstats.engine.decode import DecodedRow
from celstats.engine.finalize import descending_order, finalize, rank_levels
from celstats.engine.reduce import apply_row
from celstats.engine.state import AggregationState


def holding(balance: str, interest_usd: str = "0") -> CoinHolding:
    return CoinHolding.model_validate(
        {
            "interestCoin": "CEL",
            "totalInterestInCoin": "0",
            "totalInterestInUsd": interest_usd,
            "loyaltyTier": {"title": "BRONZE"},
            "distributionData": [{"newBalance": balance}],
        }
    )


def state_with_balances(coin: str, balances: list[str]) -> AggregationState:
    state = AggregationState()
    for i, b in enumerate(balances):
        apply_row(state, DecodedRow(account_id=f"u{i}", holdings={coin: holding(b)}))
    return state


def test_descending_order_is_stable_for_ties() -> None:
    assert descending_order(["5", "7", "5.0", "1", "7.00"]) == [1, 4, 0, 2, 3]
    assert descending_order([]) == []


def test_rank_levels_defaults_when_short() -> None:
    levels = rank_levels(["9", "8", "7"])
    assert levels.rank_1 == "9"
    assert levels.rank_10 == "0"
    assert levels.rank_10000 == "0"
    assert levels.median == "8"


def test_ranking_offsets_for_101_holders() -> None:
    # 100, 99, ..., 1 plus a second 1; fed in scrambled order
    values = [str(v) for v in range(100, 0, -1)] + ["1"]
    scrambled = values[1::2] + values[0::2]
    state = state_with_balances("BTC", scrambled)

    finalize(state)

    levels = state.coin_distribution_levels["BTC"]
    assert levels.rank_1 == "100"
    assert levels.rank_10 == "90"
    assert levels.rank_100 == "1"
    assert levels.rank_1000 == "0"
    assert levels.median == "50"


def test_distribution_truncated_to_top_hundred() -> None:
    # 251 is prime, so i*7 % 251 permutes 1..250
    balances = [str((i * 7) % 251) for i in range(1, 251)]
    state = state_with_balances("ETH", balances)
    assert state.portfolio["ETH"].number_of_holders == len(state.coin_distributions["ETH"]) == 250

    finalize(state)

    top = state.coin_distributions["ETH"]
    assert len(top) == 100
    assert [b for _, b in top] == [str(v) for v in range(250, 150, -1)]
    assert state.portfolio["ETH"].number_of_holders == 250


def test_distribution_size_is_configurable() -> None:
    state = state_with_balances("ADA", ["3", "1", "2"])
    finalize(state, distribution_size=2)
    assert state.coin_distributions["ADA"] == [("u0", "3"), ("u2", "2")]


def test_equal_balances_keep_row_order() -> None:
    state = state_with_balances("DOT", ["5", "7", "5.0"])
    finalize(state)
    assert state.coin_distributions["DOT"] == [("u1", "7"), ("u0", "5"), ("u2", "5.0")]


def test_averages_and_interest_rankings() -> None:
    state = AggregationState()
    apply_row(state, DecodedRow("u1", {"BTC": holding("1", "500"), "ETH": holding("2", "0.5")}))
    apply_row(state, DecodedRow("u2", {"BTC": holding("3", "1")}))

    finalize(state)

    stats = state.stats
    assert stats.average_number_of_coins_per_user == Decimal("1.5")
    assert stats.average_interest_per_user == Decimal("250.75")
    ranks = state.interest_earned_rankings
    assert ranks.rank_1 == "500.5"
    assert ranks.rank_10 == "0"
    assert ranks.median == "1"
    assert state.finalized


def test_zero_rows_is_degenerate() -> None:
    state = AggregationState()
    with pytest.raises(DegenerateInputError):
        finalize(state)
    assert state.stats.average_interest_per_user is None
    assert not state.finalized


def test_finalize_runs_once() -> None:
    state = state_with_balances("BTC", ["1"])
    finalize(state)
    with pytest.raises(EngineStateError):
        finalize(state)
