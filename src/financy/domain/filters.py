"""Report filters over an in-memory transaction set.

Each filter is a predicate applied to a copy of its input, so any
combination gives the same result regardless of order.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from financy.domain.aggregation import ZERO, sort_by_date_descending, sum_valor
from financy.domain.entities import Transaction, TransactionType
from financy.utils.date_parser import get_period_range, month_range

ALL = "all"


class PeriodMode(str, Enum):
    """Report period selection."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    MONTH_YEAR = "month-year"
    ALL = "all"


def filter_by_text(transactions: Iterable[Transaction], term: Optional[str]) -> list[Transaction]:
    """Case-insensitive substring match on the description."""
    if not term:
        return list(transactions)
    needle = term.lower()
    return [txn for txn in transactions if needle in txn.descricao.lower()]


def filter_by_period(
    transactions: Iterable[Transaction],
    mode: PeriodMode | str,
    reference: Optional[tuple[int, int]] = None,
    today: Optional[date] = None,
) -> list[Transaction]:
    """Keep transactions dated inside the selected period.

    Args:
        transactions: Transactions to filter
        mode: Period mode; day/week/month/year are relative to ``today``
        reference: (month, year) pair, required for the month-year mode
        today: Reference date for relative modes (defaults to the current date)

    Raises:
        ValueError: If mode is month-year and no reference is given
    """
    mode = PeriodMode(mode)
    if mode == PeriodMode.ALL:
        return list(transactions)

    if mode == PeriodMode.MONTH_YEAR:
        if reference is None:
            raise ValueError("A (month, year) reference is required for the month-year period")
        month, year = reference
        start, end = month_range(month, year)
    else:
        start, end = get_period_range(mode.value, today)

    return [
        txn
        for txn in transactions
        if isinstance(txn.data, datetime) and start <= txn.data.date() <= end
    ]


def filter_by_group(transactions: Iterable[Transaction], group_id: Optional[str]) -> list[Transaction]:
    """Exact match on group; ``"all"`` keeps everything."""
    if group_id is None or group_id == ALL:
        return list(transactions)
    return [txn for txn in transactions if txn.group_id == group_id]


def filter_by_name_prefix(
    transactions: Iterable[Transaction], name_prefix: Optional[str]
) -> list[Transaction]:
    """Match descriptions starting with a base name.

    "Notebook" matches "Notebook" and installment labels like "Notebook (3/12)".
    """
    if name_prefix is None or name_prefix == ALL:
        return list(transactions)
    return [txn for txn in transactions if txn.descricao.startswith(name_prefix)]


def filter_by_tipo(
    transactions: Iterable[Transaction], tipo: Optional[TransactionType]
) -> list[Transaction]:
    """Keep only income or only expenses."""
    if tipo is None:
        return list(transactions)
    return [txn for txn in transactions if txn.tipo == tipo]


@dataclass(frozen=True)
class ReportFilter:
    """Current report filter selection."""

    tipo: Optional[TransactionType] = None
    search_term: Optional[str] = None
    period: PeriodMode = PeriodMode.ALL
    reference: Optional[tuple[int, int]] = None
    group_id: Optional[str] = ALL
    name_prefix: Optional[str] = ALL


@dataclass(frozen=True)
class Report:
    """Filtered transactions with income and expense totals kept apart.

    Totals sum amounts regardless of status.
    """

    items: tuple[Transaction, ...]
    total_receitas: Decimal = ZERO
    total_despesas: Decimal = ZERO
    tipo: Optional[TransactionType] = None

    @property
    def total(self) -> Decimal:
        """Total of the selected type, or income minus expenses when no type is selected."""
        if self.tipo == TransactionType.RECEITA:
            return self.total_receitas
        if self.tipo == TransactionType.DESPESA:
            return self.total_despesas
        return self.total_receitas - self.total_despesas

    def __len__(self) -> int:
        return len(self.items)


def apply_report_filters(
    transactions: Iterable[Transaction],
    report_filter: ReportFilter,
    today: Optional[date] = None,
) -> list[Transaction]:
    """Apply every filter of a report selection."""
    filtered = filter_by_tipo(transactions, report_filter.tipo)
    filtered = filter_by_text(filtered, report_filter.search_term)
    filtered = filter_by_period(filtered, report_filter.period, report_filter.reference, today)
    filtered = filter_by_group(filtered, report_filter.group_id)
    return filter_by_name_prefix(filtered, report_filter.name_prefix)


def build_report(
    transactions: Iterable[Transaction],
    report_filter: ReportFilter,
    today: Optional[date] = None,
) -> Report:
    """Filter, order most recent first and total a report."""
    items = sort_by_date_descending(apply_report_filters(transactions, report_filter, today))
    return Report(
        items=tuple(items),
        total_receitas=sum_valor(filter_by_tipo(items, TransactionType.RECEITA)),
        total_despesas=sum_valor(filter_by_tipo(items, TransactionType.DESPESA)),
        tipo=report_filter.tipo,
    )


def next_month(month: int, year: int) -> tuple[int, int]:
    """Step a (month, year) pair forward."""
    if month == 12:
        return 1, year + 1
    return month + 1, year


def previous_month(month: int, year: int) -> tuple[int, int]:
    """Step a (month, year) pair back."""
    if month == 1:
        return 12, year - 1
    return month - 1, year
