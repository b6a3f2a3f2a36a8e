"""
Transaction builder service.

Responsibility: turn raw client rows into typed, immutable
:class:`~ledgerstream.models.schemas.Transaction` records and total
them.  Pure business logic – no I/O.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List

from ledgerstream.models.schemas import ParseResult, RawTransaction, Transaction
from ledgerstream.utils.financial import ZERO, exact_arithmetic, to_decimal
from ledgerstream.utils.time_utils import parse_optional_timestamp

REQUIRED_FIELDS = ("accountId", "amount", "type")


def raw_from_dict(index: int, raw: Dict[str, Any]) -> RawTransaction:
    """
    Pick the known fields out of one JSON object.

    Raises
    ------
    ValueError
        If *raw* is not an object or a required field is missing.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"Transaction #{index}: expected an object, got {type(raw).__name__}.")
    for key in REQUIRED_FIELDS:
        if key not in raw:
            raise ValueError(f"Transaction #{index}: missing {key!r} field.")
    return RawTransaction(
        account_id=raw["accountId"],
        amount=raw["amount"],
        type=raw["type"],
        timestamp=raw.get("timestamp"),
    )


def _require_text(index: int, name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(
            f"Transaction #{index}: {name!r} must be a string, got {type(value).__name__}."
        )
    if not value.strip():
        raise ValueError(f"Transaction #{index}: {name!r} must not be blank.")
    return value


def build_transactions(rows: List[RawTransaction]) -> ParseResult:
    """
    Convert raw rows into transactions.

    For each row:
    * ``accountId`` and ``type`` must be non-blank strings
    * ``amount`` must be a finite decimal number
    * ``timestamp`` is optional and defaults to now

    Parameters
    ----------
    rows:
        Raw rows, typically from :func:`raw_from_dict`.

    Returns
    -------
    ParseResult
        The transactions in input order, their exact total and count.

    Raises
    ------
    ValueError
        On the first row that fails any of the rules above.
    """
    transactions: List[Transaction] = []
    total: Decimal = ZERO

    for i, row in enumerate(rows):
        account_id = _require_text(i, "accountId", row.account_id)
        txn_type = _require_text(i, "type", row.type)
        try:
            amount = to_decimal(row.amount)
            timestamp = parse_optional_timestamp(row.timestamp)
        except ValueError as exc:
            raise ValueError(f"Transaction #{i}: {exc}") from exc

        transactions.append(
            Transaction(
                account_id=account_id,
                amount=amount,
                type=txn_type,
                timestamp=timestamp,
            )
        )
        with exact_arithmetic():
            total += amount

    return ParseResult(transactions=transactions, total_amount=total, count=len(transactions))


def parse_transaction_dicts(raw_list: Any) -> ParseResult:
    """Shortcut for a JSON array straight off the wire."""
    if not isinstance(raw_list, list):
        raise ValueError("'transactions' must be a list.")
    return build_transactions([raw_from_dict(i, r) for i, r in enumerate(raw_list)])
