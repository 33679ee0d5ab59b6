"""Predefined description domain service."""

from concurrent.futures import Future
from typing import Optional

from financy.database.base import Database
from financy.database.gateway import MutationGateway
from financy.domain.entities import (
    Collection,
    PredefinedDescription as DescriptionEntity,
    TransactionType,
)
from financy.domain.errors import NotFoundError, description_not_found
from financy.domain.validation import require_text, require_tipo


class DescriptionService:
    """Service for managing predefined descriptions."""

    def __init__(self, db: Database, gateway: MutationGateway):
        self.db = db
        self.gateway = gateway

    def create_description(self, user_id: str, name: str, tipo: TransactionType) -> "Future[str]":
        """Create a suggested label for one transaction type."""
        record = {
            "user_id": user_id,
            "name": require_text(name, "Description"),
            "tipo": require_tipo(tipo).value,
        }
        return self.gateway.create(Collection.DESCRIPTIONS, record)

    def list_descriptions(
        self, user_id: str, tipo: Optional[TransactionType] = None
    ) -> list[DescriptionEntity]:
        """List suggested labels ordered by name."""
        return self.db.list_descriptions(user_id, tipo=tipo)

    def search_descriptions(
        self, user_id: str, tipo: Optional[TransactionType] = None, text: Optional[str] = None
    ) -> list[DescriptionEntity]:
        """Descriptions containing ``text`` (case-insensitive), ordered by name."""
        needle = (text or "").strip().lower()
        return [
            d for d in self.db.list_descriptions(user_id, tipo=tipo)
            if needle in d.name.lower()
        ]

    def suggest(self, user_id: str, tipo: TransactionType, text: str = "") -> list[str]:
        """Labels of one type containing ``text`` (case-insensitive)."""
        return [d.name for d in self.search_descriptions(user_id, tipo, text)]

    def delete_description(self, user_id: str, description_id: str) -> "Future[None]":
        """Delete a suggested label.

        Raises:
            NotFoundError: If description doesn't exist
        """
        if self.db.get_description(user_id, description_id) is None:
            raise NotFoundError(description_not_found(description_id))
        return self.gateway.delete(Collection.DESCRIPTIONS, user_id, description_id)
