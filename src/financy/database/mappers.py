"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, in particular folding the flat
installment columns into the domain ``Installment`` value.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from financy.domain import entities as domain
from financy.database.models import (
    Group as ORMGroup,
    PredefinedDescription as ORMPredefinedDescription,
    Transaction as ORMTransaction,
    User as ORMUser,
)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(uid=orm_user.id, email=orm_user.email)


def installment_to_domain(orm_transaction: ORMTransaction) -> Optional[domain.Installment]:
    """Build the installment value when all installment columns are set."""
    if not orm_transaction.is_parcela:
        return None
    if (
        orm_transaction.parcela_id is None
        or orm_transaction.parcela_atual is None
        or orm_transaction.total_parcelas is None
    ):
        raise ValueError(
            f"Transaction {orm_transaction.id} is flagged as an installment "
            "but misses installment fields"
        )
    return domain.Installment(
        parcela_id=orm_transaction.parcela_id,
        parcela_atual=orm_transaction.parcela_atual,
        total_parcelas=orm_transaction.total_parcelas,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    data = orm_transaction.data if isinstance(orm_transaction.data, datetime) else None
    return domain.Transaction(
        id=orm_transaction.id,
        user_id=orm_transaction.user_id,
        descricao=orm_transaction.descricao,
        valor=Decimal(orm_transaction.valor),
        tipo=domain.TransactionType(orm_transaction.tipo),
        data=data,
        status=domain.TransactionStatus(orm_transaction.status),
        group_id=orm_transaction.group_id,
        observacao=orm_transaction.observacao,
        installment=installment_to_domain(orm_transaction),
    )


def group_to_domain(orm_group: ORMGroup) -> domain.Group:
    """Convert SQLAlchemy Group model to domain Group entity."""
    return domain.Group(
        id=orm_group.id,
        user_id=orm_group.user_id,
        name=orm_group.name,
        tipo=domain.TransactionType(orm_group.tipo),
    )


def description_to_domain(orm_description: ORMPredefinedDescription) -> domain.PredefinedDescription:
    """Convert SQLAlchemy PredefinedDescription model to domain entity."""
    return domain.PredefinedDescription(
        id=orm_description.id,
        user_id=orm_description.user_id,
        name=orm_description.name,
        tipo=domain.TransactionType(orm_description.tipo),
    )
