"""
Immutable data models for ledgerstream.

These dataclasses are the typed containers that travel between the
route → service layers.  No aggregation logic lives here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from ledgerstream.utils.time_utils import now


DEBIT = "DEBIT"
CREDIT = "CREDIT"


#Raw input atom
@dataclass(frozen=True)
class RawTransaction:
    """Single transaction row as received from the client, not yet typed."""
    account_id: Any
    amount: Any
    type: Any
    timestamp: Optional[str] = None


#Core record
@dataclass(frozen=True)
class Transaction:
    """
    A single account movement.

    ``type`` keeps whatever casing the caller supplied; compare it with
    :meth:`is_type`, never with ``==``.
    """
    account_id: str
    amount: Decimal
    type: str
    timestamp: datetime = field(default_factory=now)

    def is_type(self, kind: str) -> bool:
        return self.type.casefold() == kind.casefold()

    def to_dict(self) -> dict:
        from ledgerstream.utils.time_utils import format_timestamp
        from ledgerstream.utils.financial import decimal_to_str
        return {
            "accountId": self.account_id,
            "amount": decimal_to_str(self.amount),
            "type": self.type,
            "timestamp": format_timestamp(self.timestamp),
        }


#Builder output
@dataclass(frozen=True)
class ParseResult:
    """Output of the transaction builder service."""
    transactions: List[Transaction]
    total_amount: Decimal
    count: int

    def to_dict(self) -> list:
        return [t.to_dict() for t in self.transactions]


#Per-group summary
@dataclass(frozen=True)
class GroupSummary:
    """Count, exact total and largest amount of one group."""
    key: Any
    count: int
    total: Decimal
    max: Optional[Decimal]

    def to_dict(self) -> dict:
        from ledgerstream.utils.financial import decimal_to_str
        return {
            "key": self.key,
            "count": self.count,
            "total": decimal_to_str(self.total),
            "max": None if self.max is None else decimal_to_str(self.max),
        }
