"""
Core package for celstats contracts (constants, errors, symbols, schemas, numeric, serde).

## Contracts (single source of truth)
- Constants: ranking offsets, distribution size, header id, decimal precision.
- Errors: fatal engine errors and the recoverable UnrecognizedTierWarning.
- Symbols: coin symbol normalization and the LoyaltyTier enum.
- Schemas: pydantic models for the extract payload (CoinHolding) and the report.
- Numeric/Serde: exact decimal parsing/formatting and JSON helpers.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO.
- Report wire names are camelCase (dashboard contract); Python fields are lower_snake.

## Downstream usage
- celstats.engine: decodes rows into CoinHolding, aggregates with Decimal, builds RewardsReport.
- celstats.io: reads extracts and writes/loads RewardsReport documents.

## Examples
```python
from celstats.core.symbols import normalize_symbol, tier_from_title, LoyaltyTier
normalize_symbol("USDT ERC20")  # 'USDT'
tier_from_title("GOLD") is LoyaltyTier.GOLD  # True
```
"""
