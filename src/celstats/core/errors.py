"""
Core exception types raised by row decoding, row reduction, and finalization.

Provides typed exceptions for engine failures:
- DecodeError when a line cannot be split into id + payload or the payload is invalid.
- DecimalFieldError when a numeric field cannot be parsed as a decimal.
- DegenerateInputError when finalization is requested with zero rows applied.
- EngineStateError when the engine lifecycle is misused (row after finalize, double finalize).
- UnrecognizedTierWarning for loyalty tier labels outside the known set (recoverable).

Notes:
    - Fatal errors stop the run; no partial report is emitted.
    - UnrecognizedTierWarning is never raised by the engine. Instances are logged and
      collected on the aggregation state.

Examples:
    Catch a decode failure and inspect the offending line.

    >>> from celstats.core.errors import DecodeError
    >>> try:
    ...     raise DecodeError("missing delimiter", line="abc")
    ... except DecodeError as e:
    ...     bad = e.line
    >>> bad
    'abc'
"""

from __future__ import annotations

__all__ = [
    "RewardsError",
    "DecodeError",
    "DecimalFieldError",
    "DegenerateInputError",
    "EngineStateError",
    "UnrecognizedTierWarning",
]


class RewardsError(Exception):
    """Base class for fatal engine errors."""


class DecodeError(RewardsError, ValueError):
    """
    Raised when a line cannot be decoded into an account id and holdings payload.

    Attributes:
        line (str | None): Raw content of the offending line.
    """

    def __init__(self, message: str, *, line: str | None = None) -> None:
        super().__init__(message)
        self.line = line

    def __str__(self) -> str:
        base = super().__str__()
        if self.line is None:
            return base
        return f"{base} (line: {self.line[:200]!r})"


class DecimalFieldError(RewardsError, ArithmeticError):
    """
    Raised when a numeric field of a holding is not a finite decimal.

    Attributes:
        field (str): Wire name of the field (e.g. "totalInterestInUsd").
        value (object): Raw value that failed to parse.
        line (str | None): Raw line content; attached by the engine when known.
    """

    def __init__(self, field: str, value: object, *, coin: str | None = None) -> None:
        where = f" for coin {coin!r}" if coin else ""
        super().__init__(f"field {field!r}{where} is not a decimal: {value!r}")
        self.field = field
        self.value = value
        self.coin = coin
        self.line: str | None = None


class DegenerateInputError(RewardsError, ValueError):
    """Finalization requested before any row was applied (total_users == 0)."""


class EngineStateError(RewardsError, RuntimeError):
    """Engine used out of order (apply after finalize, or finalize twice)."""


class UnrecognizedTierWarning(UserWarning):
    """
    Loyalty tier label outside {platinum, gold, silver, bronze, none}.

    Attributes:
        tier (str): The label as found in the row.
        account_id (str): Account whose row carried the label.
    """

    def __init__(self, tier: str, account_id: str) -> None:
        super().__init__(f"Unexpected loyalty tier title found: {tier!r} (account {account_id})")
        self.tier = tier
        self.account_id = account_id
