"""Input checks shared by the domain services.

All of these run before anything is sent to the store.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from financy.database.base import Database
from financy.domain.entities import TransactionType
from financy.domain.errors import NotFoundError, ValidationError, group_not_found
from financy.utils.date_parser import to_datetime


def require_text(value: Optional[str], field_name: str) -> str:
    """Return the stripped text or reject it when empty."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} must not be empty")
    return str(value).strip()


def require_amount(value: Any, field_name: str = "Amount") -> Decimal:
    """Return a positive finite Decimal amount."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a positive number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a positive number, got '{value}'")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{field_name} must be a positive number, got '{value}'")
    return amount


def require_date(value: Any) -> datetime:
    """Return the date as a datetime or reject a missing one."""
    if not isinstance(value, date):
        raise ValidationError("A valid date is required")
    return to_datetime(value)


def require_tipo(value: Any) -> TransactionType:
    """Return the transaction type or reject unknown ones."""
    try:
        return TransactionType(value)
    except ValueError:
        raise ValidationError(f"Unknown transaction type '{value}' (expected receita or despesa)")


def require_count(value: Any) -> int:
    """Return a positive integer installment count."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"Installment count must be a positive integer, got '{value}'")
    return value


def check_group(db: Database, user_id: str, group_id: Optional[str], tipo: TransactionType) -> None:
    """Verify a group reference points to an existing group of the same type."""
    if group_id is None:
        return
    group = db.get_group(user_id, group_id)
    if group is None:
        raise NotFoundError(group_not_found(group_id))
    if group.tipo != tipo:
        raise ValidationError(
            f"Group '{group.name}' is a {group.tipo.value} group and cannot hold a {tipo.value}"
        )
