"""
Row decoder for the weekly rewards extract.

Each data line is ``<account_id>,<json-object>``: the JSON object maps coin symbols to
holding records and may itself contain commas, so only the first delimiter splits the line.
The header line (id == "id") decodes to None.

Raises DecodeError (with the raw line attached) for a line without a delimiter, a payload that
is not valid JSON, a payload that is not an object, or holdings that do not match CoinHolding.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from pydantic import TypeAdapter, ValidationError

from celstats.core.constants import FIELD_DELIMITER, HEADER_ID
from celstats.core.errors import DecodeError
from celstats.core.schema import CoinHolding
from celstats.core.serde import json_loads

__all__ = [
    "DecodedRow",
    "split_line",
    "decode_line",
]

_HOLDINGS = TypeAdapter(dict[str, CoinHolding])


@dataclass(frozen=True, slots=True)
class DecodedRow:
    """
    One account record.

    Attributes:
        account_id (str): Opaque account token (first field of the line).
        holdings (dict[str, CoinHolding]): Holdings keyed by coin symbol as found in the
            extract (not yet normalized), in payload order.
    """

    account_id: str
    holdings: dict[str, CoinHolding]


def split_line(line: str) -> tuple[str, str]:
    """
    Split a line at its first delimiter into (account_id, payload).

    Raises:
        DecodeError: If the line has no delimiter.
    """
    text = line.rstrip("\r\n")
    account_id, sep, payload = text.partition(FIELD_DELIMITER)
    if not sep:
        raise DecodeError("line has no field delimiter", line=line)
    return account_id, payload


def decode_line(line: str) -> DecodedRow | None:
    """
    Decode one line of the extract.

    Args:
        line (str): Raw line, with or without its terminator.

    Returns:
        DecodedRow | None: None for the header line.

    Raises:
        DecodeError: If the payload cannot be decoded into holdings.
    """
    account_id, payload = split_line(line)
    if account_id == HEADER_ID:
        return None
    try:
        raw = json_loads(payload)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"payload is not valid JSON: {exc}", line=line) from exc
    if not isinstance(raw, dict):
        raise DecodeError(f"payload must be a JSON object, got {type(raw).__name__}", line=line)
    try:
        holdings = _HOLDINGS.validate_python(raw)
    except ValidationError as exc:
        raise DecodeError(f"invalid holdings for account {account_id!r}: {exc}", line=line) from exc
    return DecodedRow(account_id=account_id, holdings=holdings)
