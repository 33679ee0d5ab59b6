"""Transaction domain service."""

from concurrent.futures import Future
from datetime import datetime
from decimal import Decimal
from typing import Optional

import structlog

from financy.database.base import Database
from financy.database.gateway import MutationGateway
from financy.domain.aggregation import sort_by_date_descending
from financy.domain.entities import (
    Collection,
    Transaction as TransactionEntity,
    TransactionDraft,
    TransactionStatus,
    TransactionType,
)
from financy.domain.errors import (
    DisallowedOperationError,
    NotFoundError,
    installment_member_locked,
    transaction_not_found,
)
from financy.domain.validation import (
    check_group,
    require_amount,
    require_date,
    require_text,
    require_tipo,
)

logger = structlog.get_logger(__name__)


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database, gateway: MutationGateway):
        """Initialize transaction service.

        Args:
            db: Database instance used for reads
            gateway: Mutation gateway used for writes
        """
        self.db = db
        self.gateway = gateway

    def create_transaction(
        self,
        user_id: str,
        descricao: str,
        valor: Decimal,
        tipo: TransactionType,
        data: datetime,
        group_id: Optional[str] = None,
        observacao: Optional[str] = None,
        status: TransactionStatus = TransactionStatus.PAGO,
    ) -> "Future[str]":
        """Create a transaction.

        Args:
            user_id: Owner
            descricao: Description
            valor: Positive amount
            tipo: receita or despesa
            data: Transaction date
            group_id: Optional group of the same type
            observacao: Optional notes
            status: pago (default) or pendente

        Returns:
            Future resolving to the new transaction ID

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If the group doesn't exist
        """
        draft = TransactionDraft(
            user_id=user_id,
            descricao=require_text(descricao, "Description"),
            valor=require_amount(valor),
            tipo=require_tipo(tipo),
            data=require_date(data),
            status=TransactionStatus(status),
            group_id=group_id,
            observacao=observacao or None,
        )
        check_group(self.db, user_id, group_id, draft.tipo)

        logger.info("transaction_create", user_id=user_id, tipo=draft.tipo.value)
        return self.gateway.create(Collection.TRANSACTIONS, draft.to_record())

    def get_transaction(self, user_id: str, transaction_id: str) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(user_id, transaction_id)

    def require_transaction(self, user_id: str, transaction_id: str) -> TransactionEntity:
        """Get transaction by ID or raise NotFoundError."""
        txn = self.db.get_transaction(user_id, transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def list_transactions(self, user_id: str) -> list[TransactionEntity]:
        """List a user's transactions, most recent first."""
        return sort_by_date_descending(self.db.list_transactions(user_id))

    def update_transaction(
        self,
        user_id: str,
        transaction_id: str,
        descricao: str,
        valor: Decimal,
        data: datetime,
        group_id: Optional[str] = None,
        observacao: Optional[str] = None,
        status: Optional[TransactionStatus] = None,
    ) -> "Future[None]":
        """Replace the editable fields of a transaction.

        The type is fixed at creation and is not part of an edit. Status is
        kept unless given. The group is only checked when it changes.

        Raises:
            NotFoundError: If transaction or group doesn't exist
            DisallowedOperationError: If the transaction is an installment member
            ValidationError: If any field is invalid
        """
        txn = self.require_transaction(user_id, transaction_id)
        if txn.is_parcela:
            raise DisallowedOperationError(installment_member_locked(transaction_id, "edit"))

        changes = {
            "descricao": require_text(descricao, "Description"),
            "valor": require_amount(valor),
            "data": require_date(data),
            "group_id": group_id,
            "observacao": observacao or None,
        }
        if status is not None:
            changes["status"] = TransactionStatus(status).value
        # A kept reference may point at a deleted group
        if group_id != txn.group_id:
            check_group(self.db, user_id, group_id, txn.tipo)

        logger.info("transaction_update", user_id=user_id, transaction_id=transaction_id)
        return self.gateway.update(Collection.TRANSACTIONS, user_id, transaction_id, changes)

    def mark_paid(self, user_id: str, transaction_id: str) -> "Future[None]":
        """Settle a transaction. Settling a settled transaction changes nothing.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        self.require_transaction(user_id, transaction_id)
        return self.gateway.update(
            Collection.TRANSACTIONS,
            user_id,
            transaction_id,
            {"status": TransactionStatus.PAGO.value},
        )

    def delete_transaction(self, user_id: str, transaction_id: str) -> "Future[None]":
        """Delete a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
            DisallowedOperationError: If the transaction is an installment member
        """
        txn = self.require_transaction(user_id, transaction_id)
        if txn.is_parcela:
            raise DisallowedOperationError(installment_member_locked(transaction_id, "delete"))

        logger.info("transaction_delete", user_id=user_id, transaction_id=transaction_id)
        return self.gateway.delete(Collection.TRANSACTIONS, user_id, transaction_id)
