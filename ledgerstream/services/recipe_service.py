"""
Ready-made transaction reports.

Each function fixes the parameters of one or more aggregation-engine
calls for a question that comes up again and again in banking code
("what did each account spend?", "which are the five biggest
movements?").  No logic of its own beyond the composition.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, FrozenSet, List, Optional

from ledgerstream import config
from ledgerstream.models.schemas import CREDIT, DEBIT, GroupSummary, Transaction
from ledgerstream.services.aggregation_service import (
    apply_percentage_adjustment,
    by_account,
    by_type,
    count_by_group,
    filter_by_amount_greater_than,
    filter_by_type,
    filter_then_sum_by_group,
    group_by,
    map_to_field,
    max_amount,
    sum_amount_by_group,
    top_n_by_amount,
    total_amount,
    unique_keys,
)
from ledgerstream.utils.financial import deduction_factor, to_decimal


# ── Filters ──────────────────────────────────────────────────────────────────

def only_debits(transactions: List[Transaction]) -> List[Transaction]:
    return filter_by_type(transactions, DEBIT)


def only_credits(transactions: List[Transaction]) -> List[Transaction]:
    return filter_by_type(transactions, CREDIT)


def big_debits(
    transactions: List[Transaction],
    threshold: Optional[Decimal] = None,
) -> List[Decimal]:
    """Amounts of the debits strictly above *threshold* (default 100)."""
    limit = config.BIG_DEBIT_THRESHOLD if threshold is None else to_decimal(threshold)
    return map_to_field(
        filter_by_amount_greater_than(only_debits(transactions), limit),
        "amount",
    )


# ── Projections ──────────────────────────────────────────────────────────────

def account_ids(transactions: List[Transaction]) -> List[str]:
    return map_to_field(transactions, by_account)


def amounts(transactions: List[Transaction]) -> List[Decimal]:
    return map_to_field(transactions, "amount")


def apply_commission(
    transactions: List[Transaction],
    rate: Optional[Decimal] = None,
) -> List[Decimal]:
    """Amounts after deducting a commission *rate* (default 2 %, i.e. × 0.98)."""
    commission = config.COMMISSION_RATE if rate is None else to_decimal(rate)
    return apply_percentage_adjustment(transactions, deduction_factor(commission))


def unique_account_ids(transactions: List[Transaction]) -> FrozenSet[str]:
    return unique_keys(transactions, by_account)


# ── Groupings ────────────────────────────────────────────────────────────────

def group_by_account(transactions: List[Transaction]) -> Dict[str, List[Transaction]]:
    return group_by(transactions, by_account)


def group_by_type(transactions: List[Transaction]) -> Dict[str, List[Transaction]]:
    return group_by(transactions, by_type)


def total_by_account(transactions: List[Transaction]) -> Dict[str, Decimal]:
    return sum_amount_by_group(transactions, by_account)


def count_by_account(transactions: List[Transaction]) -> Dict[str, int]:
    return count_by_group(transactions, by_account)


def count_by_type(transactions: List[Transaction]) -> Dict[str, int]:
    return count_by_group(transactions, by_type)


def debit_total_by_account(transactions: List[Transaction]) -> Dict[str, Decimal]:
    return filter_then_sum_by_group(transactions, lambda t: t.is_type(DEBIT), by_account)


def credit_total_by_account(transactions: List[Transaction]) -> Dict[str, Decimal]:
    return filter_then_sum_by_group(transactions, lambda t: t.is_type(CREDIT), by_account)


def top_five_by_amount(transactions: List[Transaction]) -> List[Transaction]:
    return top_n_by_amount(transactions, config.DEFAULT_TOP_N)


def summarize_by_account(transactions: List[Transaction]) -> List[GroupSummary]:
    """
    One :class:`~ledgerstream.models.schemas.GroupSummary` per account,
    in order of first appearance.
    """
    return [
        GroupSummary(
            key=account,
            count=len(members),
            total=total_amount(members),
            max=max_amount(members),
        )
        for account, members in group_by_account(transactions).items()
    ]
