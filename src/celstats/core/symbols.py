"""
Coin symbol and loyalty tier vocabulary.

Defines the canonical loyalty tiers and the compatibility rewrites applied to coin
symbols before they are used as portfolio keys. Zero-IO, stdlib-only.

Responsibilities
- Canonicalize known-ambiguous coin symbols (normalize_symbol).
- Define the LoyaltyTier enum and map free-form tier titles onto summary keys.

Notes
- normalize_symbol is idempotent: canonical forms are never themselves rewritten.
- Held coin and interest coin are normalized independently by the reducer.

Examples:
    >>> from celstats.core.symbols import normalize_symbol
    >>> normalize_symbol("USDT ERC20")
    'USDT'
    >>> normalize_symbol(normalize_symbol("MCDAI"))
    'DAI'
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "SYMBOL_ALIASES",
    "LoyaltyTier",
    "normalize_symbol",
    "tier_from_title",
]

# Vendor-qualified or legacy symbol -> canonical symbol.
SYMBOL_ALIASES: dict[str, str] = {
    "USDT ERC20": "USDT",
    "MCDAI": "DAI",
}


class LoyaltyTier(Enum):
    """Loyalty tiers as keyed in the report's loyaltyTierSummary."""

    PLATINUM = "platinum"
    GOLD = "gold"
    SILVER = "silver"
    BRONZE = "bronze"
    NONE = "none"


def normalize_symbol(symbol: str) -> str:
    """
    Map a coin symbol onto its canonical form.

    Args:
        symbol (str): Symbol as found in the extract.

    Returns:
        str: Canonical symbol; unknown symbols are returned unchanged.
    """
    return SYMBOL_ALIASES.get(symbol, symbol)


def tier_from_title(title: str) -> LoyaltyTier | None:
    """
    Resolve a tier title (e.g. "GOLD") to a LoyaltyTier.

    Returns:
        LoyaltyTier | None: None when the lowercased title is not a known tier,
        including the empty title of a row without holdings.
    """
    try:
        return LoyaltyTier((title or "").lower())
    except ValueError:
        return None
