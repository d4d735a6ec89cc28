from celstats.core.symbols import LoyaltyTier, normalize_symbol, tier_from_title


def test_known_aliases_are_rewritten() -> None:
    assert normalize_symbol("USDT ERC20") == "USDT"
    assert normalize_symbol("MCDAI") == "DAI"


def test_unknown_symbols_pass_through() -> None:
    for s in ["BTC", "ETH", "CEL", "usdt erc20", "DAI", ""]:
        assert normalize_symbol(s) == s


def test_normalize_is_idempotent() -> None:
    for s in ["USDT ERC20", "MCDAI", "USDT", "DAI", "BTC", "CEL", "PAXG"]:
        once = normalize_symbol(s)
        assert normalize_symbol(once) == once


def test_tier_from_title_is_case_insensitive() -> None:
    assert tier_from_title("GOLD") is LoyaltyTier.GOLD
    assert tier_from_title("platinum") is LoyaltyTier.PLATINUM
    assert tier_from_title("None") is LoyaltyTier.NONE


def test_tier_from_title_unknown_or_empty() -> None:
    assert tier_from_title("DIAMOND") is None
    assert tier_from_title("") is None
