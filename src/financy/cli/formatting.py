"""Display helpers for amounts and dates."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from financy.domain.entities import Transaction, TransactionType

MONTH_NAMES = [
    "Jan", "Fev", "Mar", "Abr", "Mai", "Jun",
    "Jul", "Ago", "Set", "Out", "Nov", "Dez",
]


def format_currency(amount: Decimal) -> str:
    """Format as Brazilian reais, e.g. R$ 1.234,56 or -R$ 10,00."""
    sign = "-" if amount < 0 else ""
    text = f"{abs(amount):,.2f}"
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {text}"


def format_date(value: Optional[datetime]) -> str:
    """Format as dd/mm/yyyy; missing dates show a dash."""
    if value is None:
        return "-"
    return value.strftime("%d/%m/%Y")


def format_month(year: int, month: int) -> str:
    """Short month label, e.g. Mar/24."""
    return f"{MONTH_NAMES[month - 1]}/{year % 100:02d}"


def signed_amount(txn: Transaction) -> str:
    """Amount prefixed with + for income and - for expenses."""
    prefix = "+" if txn.tipo == TransactionType.RECEITA else "-"
    return f"{prefix} {format_currency(txn.valor)}"
