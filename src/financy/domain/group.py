"""Group domain service."""

from concurrent.futures import Future
from typing import Optional

import structlog

from financy.database.base import Database
from financy.database.gateway import MutationGateway
from financy.domain.entities import Collection, Group as GroupEntity, TransactionType
from financy.domain.errors import NotFoundError, group_not_found
from financy.domain.validation import require_text, require_tipo

logger = structlog.get_logger(__name__)


class GroupService:
    """Service for managing transaction groups."""

    def __init__(self, db: Database, gateway: MutationGateway):
        """Initialize group service.

        Args:
            db: Database instance used for reads
            gateway: Mutation gateway used for writes
        """
        self.db = db
        self.gateway = gateway

    def create_group(self, user_id: str, name: str, tipo: TransactionType) -> "Future[str]":
        """Create a group for one transaction type.

        Returns:
            Future resolving to the new group ID

        Raises:
            ValidationError: If name is empty or type is unknown
        """
        record = {
            "user_id": user_id,
            "name": require_text(name, "Group name"),
            "tipo": require_tipo(tipo).value,
        }
        logger.info("group_create", user_id=user_id, tipo=record["tipo"])
        return self.gateway.create(Collection.GROUPS, record)

    def get_group(self, user_id: str, group_id: str) -> Optional[GroupEntity]:
        """Get group by ID.

        Returns:
            Group entity or None if not found
        """
        return self.db.get_group(user_id, group_id)

    def find_group_by_name(
        self, user_id: str, name: str, tipo: Optional[TransactionType] = None
    ) -> Optional[GroupEntity]:
        """Find a group by exact name, optionally within one type."""
        for group in self.db.list_groups(user_id, tipo=tipo):
            if group.name == name:
                return group
        return None

    def list_groups(self, user_id: str, tipo: Optional[TransactionType] = None) -> list[GroupEntity]:
        """List groups ordered by name, optionally for one type."""
        return self.db.list_groups(user_id, tipo=tipo)

    def delete_group(self, user_id: str, group_id: str) -> "Future[None]":
        """Delete a group.

        Transactions pointing at it keep their group_id; lookups of a
        deleted group simply find nothing.

        Raises:
            NotFoundError: If group doesn't exist
        """
        if self.db.get_group(user_id, group_id) is None:
            raise NotFoundError(group_not_found(group_id))

        logger.info("group_delete", user_id=user_id, group_id=group_id)
        return self.gateway.delete(Collection.GROUPS, user_id, group_id)
