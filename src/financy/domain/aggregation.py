"""Balance, totals and monthly grouping over an in-memory transaction set.

Every function here is pure: it reads the given sequence and returns new
values, so callers can recompute everything from scratch on each snapshot.
"""

from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from financy.domain.entities import (
    Group,
    MonthlyBucket,
    Totals,
    Transaction,
    TransactionType,
)

EPOCH = datetime(1970, 1, 1)
ZERO = Decimal("0")


def _sort_key(txn: Transaction) -> datetime:
    value = txn.data
    if not isinstance(value, datetime):
        return EPOCH
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def sort_by_date_descending(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Order transactions most recent first.

    Missing dates sort as the epoch. Equal dates keep the input order.
    """
    return sorted(transactions, key=_sort_key, reverse=True)


def recent_transactions(transactions: Iterable[Transaction], limit: int = 5) -> list[Transaction]:
    """Return the ``limit`` most recent transactions."""
    return sort_by_date_descending(transactions)[:limit]


def signed_value(txn: Transaction) -> Decimal:
    """Income counts positive, expense negative."""
    if txn.tipo == TransactionType.RECEITA:
        return txn.valor
    return -txn.valor


def compute_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of settled income minus settled expenses."""
    return sum((signed_value(txn) for txn in transactions if txn.is_settled), ZERO)


def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    """Settled income and expense totals."""
    receitas = ZERO
    despesas = ZERO
    for txn in transactions:
        if not txn.is_settled:
            continue
        if txn.tipo == TransactionType.RECEITA:
            receitas += txn.valor
        else:
            despesas += txn.valor
    return Totals(total_receitas=receitas, total_despesas=despesas)


def sum_valor(transactions: Iterable[Transaction]) -> Decimal:
    """Plain sum of amounts, regardless of type or status."""
    return sum((txn.valor for txn in transactions), ZERO)


def group_by_month(transactions: Iterable[Transaction]) -> list[MonthlyBucket]:
    """Bucket settled, dated transactions by calendar year-month.

    Buckets come most recent month first; members inside a bucket are in
    date-descending order.
    """
    members: dict[tuple[int, int], list[Transaction]] = defaultdict(list)

    for txn in sort_by_date_descending(transactions):
        if not txn.is_settled or not isinstance(txn.data, datetime):
            continue
        members[(txn.data.year, txn.data.month)].append(txn)

    buckets = []
    for (year, month) in sorted(members.keys(), reverse=True):
        totals = compute_totals(members[(year, month)])
        buckets.append(
            MonthlyBucket(
                year=year,
                month=month,
                total_receitas=totals.total_receitas,
                total_despesas=totals.total_despesas,
                transactions=tuple(members[(year, month)]),
            )
        )
    return buckets


def group_name(groups: Sequence[Group], group_id: Optional[str]) -> Optional[str]:
    """Look up a group name; absent or dangling references yield None."""
    if group_id is None:
        return None
    for group in groups:
        if group.id == group_id:
            return group.name
    return None
