"""Installment (parcela) domain service.

A parceled purchase becomes N expense transactions sharing one
``parcela_id``, one per month starting at the first due date. The members
are created and deleted together in a single atomic batch.
"""

from concurrent.futures import Future
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from uuid import uuid4

import structlog

from financy.database.base import Database, WriteOperation
from financy.database.gateway import MutationGateway
from financy.domain.entities import (
    Collection,
    Installment,
    Transaction,
    TransactionDraft,
    TransactionStatus,
    TransactionType,
)
from financy.domain.errors import (
    NothingToDeleteError,
    NotFoundError,
    ValidationError,
    no_installments_found,
    transaction_not_found,
)
from financy.domain.validation import (
    check_group,
    require_amount,
    require_count,
    require_date,
    require_text,
)
from financy.utils.date_parser import add_months

logger = structlog.get_logger(__name__)

CENTS = Decimal("0.01")


def installment_value(valor_total: Decimal, count: int) -> Decimal:
    """Per-installment amount, rounded to cents on its own.

    The members may not add back up to the total (1000 / 3 -> 333.33 x 3).
    """
    return (valor_total / count).quantize(CENTS, rounding=ROUND_HALF_UP)


def installment_label(descricao: str, number: int, count: int) -> str:
    """Description of one member, e.g. "Notebook (3/12)"."""
    return f"{descricao} ({number}/{count})"


def plan_installments(
    user_id: str,
    descricao: str,
    valor_total: Decimal,
    count: int,
    first_date: datetime,
    group_id: Optional[str] = None,
    parcela_id: Optional[str] = None,
) -> list[TransactionDraft]:
    """Expand one parceled purchase into its member drafts.

    Args:
        user_id: Owner
        descricao: Base description
        valor_total: Total purchase amount
        count: Number of installments
        first_date: Due date of the first installment
        group_id: Optional expense group
        parcela_id: Shared identifier (a fresh one is generated when omitted)

    Returns:
        One pending expense draft per installment, in installment order
    """
    descricao = require_text(descricao, "Description")
    valor_total = require_amount(valor_total, "Total amount")
    count = require_count(count)
    first_date = require_date(first_date)
    if parcela_id is None:
        parcela_id = uuid4().hex

    valor = installment_value(valor_total, count)
    return [
        TransactionDraft(
            user_id=user_id,
            descricao=installment_label(descricao, i + 1, count),
            valor=valor,
            tipo=TransactionType.DESPESA,
            data=add_months(first_date, i),
            status=TransactionStatus.PENDENTE,
            group_id=group_id,
            installment=Installment(
                parcela_id=parcela_id,
                parcela_atual=i + 1,
                total_parcelas=count,
            ),
        )
        for i in range(count)
    ]


@dataclass(frozen=True)
class InstallmentSubmission:
    """Result of queueing a parceled purchase."""

    parcela_id: str
    drafts: tuple[TransactionDraft, ...]
    future: "Future[list[Optional[str]]]"


class InstallmentService:
    """Service for creating, settling and deleting installment groups."""

    def __init__(self, db: Database, gateway: MutationGateway):
        """Initialize installment service.

        Args:
            db: Database instance used for reads
            gateway: Mutation gateway used for writes
        """
        self.db = db
        self.gateway = gateway

    def create_installments(
        self,
        user_id: str,
        descricao: str,
        valor_total: Decimal,
        count: int,
        first_date: datetime,
        group_id: Optional[str] = None,
    ) -> InstallmentSubmission:
        """Create every installment of a purchase in one atomic batch.

        Raises:
            ValidationError: If any input is invalid or the group is not an expense group
            NotFoundError: If the group doesn't exist
        """
        drafts = plan_installments(user_id, descricao, valor_total, count, first_date, group_id)
        check_group(self.db, user_id, group_id, TransactionType.DESPESA)

        parcela_id = drafts[0].installment.parcela_id
        operations = [
            WriteOperation.create(Collection.TRANSACTIONS, draft.to_record()) for draft in drafts
        ]
        logger.info(
            "installments_create",
            user_id=user_id,
            parcela_id=parcela_id,
            count=len(drafts),
        )
        future = self.gateway.batch_write(operations)
        return InstallmentSubmission(parcela_id=parcela_id, drafts=tuple(drafts), future=future)

    def mark_installment_paid(self, user_id: str, transaction_id: str) -> "Future[None]":
        """Settle one installment; its siblings keep their status.

        Raises:
            NotFoundError: If transaction doesn't exist
            ValidationError: If the transaction is not an installment
        """
        txn = self.db.get_transaction(user_id, transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        if not txn.is_parcela:
            raise ValidationError(f"Transaction {transaction_id} is not an installment")

        return self.gateway.update(
            Collection.TRANSACTIONS,
            user_id,
            transaction_id,
            {"status": TransactionStatus.PAGO.value},
        )

    def list_installments(self, user_id: str, parcela_id: str) -> list[Transaction]:
        """List the members of an installment group in installment order."""
        members = self.db.list_transactions(user_id, parcela_id=parcela_id)
        return sorted(members, key=lambda txn: txn.installment.parcela_atual)

    def delete_installment_group(self, user_id: str, parcela_id: str) -> "Future[list[Optional[str]]]":
        """Delete every member of an installment group in one atomic batch.

        Members are removed whatever their status.

        Raises:
            NothingToDeleteError: If the group has no members
        """
        members = self.db.list_transactions(user_id, parcela_id=parcela_id)
        if not members:
            logger.warning("installments_delete_empty", user_id=user_id, parcela_id=parcela_id)
            raise NothingToDeleteError(no_installments_found(parcela_id))

        operations = [
            WriteOperation.delete(Collection.TRANSACTIONS, user_id, txn.id) for txn in members
        ]
        logger.info(
            "installments_delete",
            user_id=user_id,
            parcela_id=parcela_id,
            count=len(members),
        )
        return self.gateway.batch_write(operations)
