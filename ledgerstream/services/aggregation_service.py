"""
Aggregation engine.

Responsibility: filter, project, group and reduce a list of
:class:`~ledgerstream.models.schemas.Transaction` records.  Pure
business logic – no I/O, no logging, no state kept between calls.

Every function:

* reads its input list and never mutates it,
* returns a freshly built container,
* keeps amounts as :class:`~decimal.Decimal` end to end.

Key selectors and field selectors may be given either as a callable
(``lambda t: t.account_id``) or as a field name (``"account_id"``,
``"accountId"``, ``"amount"``, ``"type"``, ``"timestamp"``).
"""

from __future__ import annotations

from decimal import Decimal
from operator import attrgetter
from typing import Any, Callable, Dict, FrozenSet, Hashable, List, Optional, Sequence, Union

from ledgerstream.exceptions import InvalidArgumentError
from ledgerstream.models.schemas import Transaction
from ledgerstream.utils.financial import ZERO, exact_arithmetic, to_decimal

Selector = Union[str, Callable[[Transaction], Any]]
Predicate = Callable[[Transaction], bool]

FIELD_NAMES = {
    "account_id": "account_id",
    "accountId": "account_id",
    "amount": "amount",
    "type": "type",
    "timestamp": "timestamp",
}


# ── Named key selectors ──────────────────────────────────────────────────────

def by_account(txn: Transaction) -> str:
    return txn.account_id


def by_type(txn: Transaction) -> str:
    """Type normalised to upper case so "DEBIT", "debit" and "Debit" collide."""
    return txn.type.upper()


# Field names that group by a normalised value rather than the raw one.
# map_to_field still returns the raw field.
KEY_FIELDS: Dict[str, Callable[[Transaction], Any]] = {
    "type": by_type,
}


# ── Argument helpers ─────────────────────────────────────────────────────────

def resolve_selector(selector: Optional[Selector], role: str = "key selector") -> Callable[[Transaction], Any]:
    """
    Turn *selector* into a one-argument callable.

    Raises
    ------
    InvalidArgumentError
        If *selector* is ``None``, an unknown field name, or neither a
        string nor a callable.
    """
    if selector is None:
        raise InvalidArgumentError(f"A {role} is required.")
    if isinstance(selector, str):
        try:
            return attrgetter(FIELD_NAMES[selector])
        except KeyError:
            raise InvalidArgumentError(
                f"Unknown field {selector!r}; expected one of {sorted(FIELD_NAMES)}."
            ) from None
    if callable(selector):
        return selector
    raise InvalidArgumentError(
        f"A {role} must be a field name or a callable, got {type(selector).__name__}."
    )


def resolve_key(selector: Optional[Selector]) -> Callable[[Transaction], Any]:
    """
    Like :func:`resolve_selector`, for grouping.

    The field name ``"type"`` groups case-insensitively via :func:`by_type`.
    """
    if isinstance(selector, str) and selector in KEY_FIELDS:
        return KEY_FIELDS[selector]
    return resolve_selector(selector)


def _require_predicate(predicate: Optional[Predicate]) -> Predicate:
    if predicate is None:
        raise InvalidArgumentError("A predicate is required.")
    if not callable(predicate):
        raise InvalidArgumentError(
            f"A predicate must be callable, got {type(predicate).__name__}."
        )
    return predicate


def _require_count(n: Any) -> int:
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidArgumentError(f"'n' must be an integer, got {type(n).__name__}.")
    if n < 0:
        raise InvalidArgumentError(f"'n' must be >= 0, got {n}.")
    return n


# ── Predicate filters ────────────────────────────────────────────────────────

def filter_by_type(transactions: Sequence[Transaction], txn_type: str) -> List[Transaction]:
    """Transactions whose type equals *txn_type*, ignoring case, in input order."""
    if txn_type is None:
        raise InvalidArgumentError("A transaction type is required.")
    if not isinstance(txn_type, str):
        raise InvalidArgumentError(
            f"A transaction type must be a string, got {type(txn_type).__name__}."
        )
    return [t for t in transactions if t.is_type(txn_type)]


def filter_by_amount_greater_than(
    transactions: Sequence[Transaction],
    min_amount: Any,
) -> List[Transaction]:
    """Transactions whose amount is strictly greater than *min_amount*."""
    if min_amount is None:
        raise InvalidArgumentError("A minimum amount is required.")
    threshold = to_decimal(min_amount)
    return [t for t in transactions if t.amount > threshold]


# ── Projections ──────────────────────────────────────────────────────────────

def map_to_field(transactions: Sequence[Transaction], selector: Selector) -> List[Any]:
    """One extracted value per transaction, same order and length as the input."""
    extract = resolve_selector(selector, "field selector")
    return [extract(t) for t in transactions]


def apply_percentage_adjustment(
    transactions: Sequence[Transaction],
    factor: Any,
) -> List[Decimal]:
    """
    Every amount multiplied by *factor*.

    ``apply_percentage_adjustment(txns, "0.98")`` removes a 2 % commission.
    The factor is converted with :func:`~ledgerstream.utils.financial.to_decimal`
    so passing the float ``0.98`` still multiplies by exactly ``0.98``.
    """
    if factor is None:
        raise InvalidArgumentError("An adjustment factor is required.")
    multiplier = to_decimal(factor)
    with exact_arithmetic():
        return [t.amount * multiplier for t in transactions]


# ── Grouping & reduction ─────────────────────────────────────────────────────

def group_by(
    transactions: Sequence[Transaction],
    key: Selector,
) -> Dict[Hashable, List[Transaction]]:
    """
    Partition *transactions* by *key*.

    Keys appear in order of first occurrence and every group keeps the
    original relative order of its members.
    """
    extract = resolve_key(key)
    groups: Dict[Hashable, List[Transaction]] = {}
    for txn in transactions:
        groups.setdefault(extract(txn), []).append(txn)
    return groups


def sum_amount_by_group(
    transactions: Sequence[Transaction],
    key: Selector,
) -> Dict[Hashable, Decimal]:
    """Exact amount total per key.  Keys with no members never appear."""
    extract = resolve_key(key)
    totals: Dict[Hashable, Decimal] = {}
    with exact_arithmetic():
        for txn in transactions:
            k = extract(txn)
            totals[k] = totals.get(k, ZERO) + txn.amount
    return totals


def count_by_group(
    transactions: Sequence[Transaction],
    key: Selector,
) -> Dict[Hashable, int]:
    extract = resolve_key(key)
    counts: Dict[Hashable, int] = {}
    for txn in transactions:
        k = extract(txn)
        counts[k] = counts.get(k, 0) + 1
    return counts


def unique_keys(transactions: Sequence[Transaction], key: Selector) -> FrozenSet[Hashable]:
    extract = resolve_key(key)
    return frozenset(extract(t) for t in transactions)


def filter_then_sum_by_group(
    transactions: Sequence[Transaction],
    predicate: Predicate,
    key: Selector,
) -> Dict[Hashable, Decimal]:
    """
    Keep the transactions matching *predicate*, then total them per key.

    Rejected transactions contribute to no group, so a key whose members
    all fail the predicate is absent rather than mapped to zero.
    """
    keep = _require_predicate(predicate)
    extract = resolve_key(key)
    return sum_amount_by_group([t for t in transactions if keep(t)], extract)


# ── Reduction to scalar ──────────────────────────────────────────────────────

def total_amount(transactions: Sequence[Transaction]) -> Decimal:
    """Exact sum of every amount; ``Decimal("0")`` for an empty list."""
    with exact_arithmetic():
        return sum((t.amount for t in transactions), ZERO)


def max_amount(transactions: Sequence[Transaction]) -> Optional[Decimal]:
    """Largest amount, or ``None`` when there is nothing to compare."""
    return max((t.amount for t in transactions), default=None)


def concatenate_distinct_keys(
    transactions: Sequence[Transaction],
    key: Selector,
    separator: str = ",",
) -> str:
    """
    Distinct keys in first-occurrence order joined by *separator*.

    There is no leading separator: ``"A,B"``, never ``",A,B"``.  An empty
    list gives ``""``.
    """
    extract = resolve_key(key)
    distinct = dict.fromkeys(extract(t) for t in transactions)
    return separator.join(str(k) for k in distinct)


# ── Ordering ─────────────────────────────────────────────────────────────────

def top_n_by_amount(transactions: Sequence[Transaction], n: int) -> List[Transaction]:
    """
    The *n* largest transactions by amount, largest first.

    ``sorted`` is stable with ``reverse=True`` too, so equal amounts keep
    their input order.  Asking for more than there are returns them all.

    Raises
    ------
    InvalidArgumentError
        If *n* is negative or not an integer.
    """
    limit = _require_count(n)
    return sorted(transactions, key=attrgetter("amount"), reverse=True)[:limit]
