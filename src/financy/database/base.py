"""Abstract store interface."""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Sequence

import structlog

# Import entities directly to avoid circular import through domain/__init__.py
from financy.domain.entities import (
    Collection,
    Group,
    PredefinedDescription,
    Transaction,
    TransactionType,
    User,
)

logger = structlog.get_logger(__name__)

SnapshotCallback = Callable[[list[Any]], None]
Predicate = Callable[[Any], bool]


class WriteKind(str, Enum):
    """Kinds of write operations accepted by a batch."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class WriteOperation:
    """One write inside an atomic batch."""

    kind: WriteKind
    collection: Collection
    user_id: str
    entity_id: Optional[str] = None
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, collection: Collection, data: dict[str, Any]) -> "WriteOperation":
        return cls(WriteKind.CREATE, collection, data["user_id"], data=dict(data))

    @classmethod
    def update(
        cls, collection: Collection, user_id: str, entity_id: str, changes: dict[str, Any]
    ) -> "WriteOperation":
        return cls(WriteKind.UPDATE, collection, user_id, entity_id, dict(changes))

    @classmethod
    def delete(cls, collection: Collection, user_id: str, entity_id: str) -> "WriteOperation":
        return cls(WriteKind.DELETE, collection, user_id, entity_id)


class Subscription:
    """Handle for a live collection subscription."""

    def __init__(self, unsubscribe: Callable[[], None]):
        self._unsubscribe = unsubscribe
        self.closed = False

    def close(self) -> None:
        """Stop receiving snapshots."""
        if not self.closed:
            self._unsubscribe()
            self.closed = True


@dataclass
class _Subscriber:
    user_id: str
    collection: Collection
    callback: SnapshotCallback
    predicate: Optional[Predicate] = None


class Database(ABC):
    """Abstract store interface for financy.

    Records are partitioned by user. Every committed write pushes the full,
    current snapshot of the touched collection to its subscribers.
    """

    def __init__(self) -> None:
        self._subscribers: list[_Subscriber] = []
        # Held across snapshot reads and deliveries so a subscriber never
        # receives an older snapshot after a newer one
        self._subscribers_lock = threading.RLock()

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # User and session operations
    @abstractmethod
    def create_user(self, email: str, password_hash: str) -> str:
        """Create a user. Returns the user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_credentials(self, email: str) -> Optional[tuple[User, str]]:
        """Get a user and its password hash by e-mail."""
        pass

    @abstractmethod
    def get_session_user_id(self) -> Optional[str]:
        """Get the signed-in user ID, if any."""
        pass

    @abstractmethod
    def set_session_user_id(self, user_id: Optional[str]) -> None:
        """Record the signed-in user ID (None signs out)."""
        pass

    # Generic writes
    @abstractmethod
    def insert(self, collection: Collection, data: dict[str, Any]) -> str:
        """Insert a record. ``data`` must carry ``user_id``. Returns the new ID."""
        pass

    @abstractmethod
    def update(
        self, collection: Collection, user_id: str, entity_id: str, changes: dict[str, Any]
    ) -> None:
        """Update fields of a record owned by ``user_id``."""
        pass

    @abstractmethod
    def delete(self, collection: Collection, user_id: str, entity_id: str) -> None:
        """Delete a record owned by ``user_id``."""
        pass

    @abstractmethod
    def batch_write(self, operations: Sequence[WriteOperation]) -> list[Optional[str]]:
        """Apply all operations atomically.

        Returns the new ID for each create and None for other operations.
        Either every operation is committed or none is.
        """
        pass

    # Reads
    @abstractmethod
    def get_transaction(self, user_id: str, transaction_id: str) -> Optional[Transaction]:
        """Get a transaction owned by ``user_id``."""
        pass

    @abstractmethod
    def list_transactions(
        self, user_id: str, parcela_id: Optional[str] = None
    ) -> list[Transaction]:
        """List a user's transactions in store order.

        Args:
            user_id: Owner
            parcela_id: Optional installment group filter
        """
        pass

    @abstractmethod
    def get_group(self, user_id: str, group_id: str) -> Optional[Group]:
        """Get a group owned by ``user_id``."""
        pass

    @abstractmethod
    def list_groups(self, user_id: str, tipo: Optional[TransactionType] = None) -> list[Group]:
        """List a user's groups, optionally for one transaction type."""
        pass

    @abstractmethod
    def get_description(self, user_id: str, description_id: str) -> Optional[PredefinedDescription]:
        """Get a predefined description owned by ``user_id``."""
        pass

    @abstractmethod
    def list_descriptions(
        self, user_id: str, tipo: Optional[TransactionType] = None
    ) -> list[PredefinedDescription]:
        """List a user's predefined descriptions, optionally for one transaction type."""
        pass

    def snapshot(self, user_id: str, collection: Collection) -> list[Any]:
        """Full current contents of one user's collection."""
        if collection == Collection.TRANSACTIONS:
            return self.list_transactions(user_id)
        if collection == Collection.GROUPS:
            return self.list_groups(user_id)
        return self.list_descriptions(user_id)

    # Subscriptions
    def subscribe(
        self,
        user_id: str,
        collection: Collection,
        callback: SnapshotCallback,
        predicate: Optional[Predicate] = None,
    ) -> Subscription:
        """Subscribe to full snapshots of a user's collection.

        The current snapshot is delivered immediately, then again after every
        committed write touching that collection.
        """
        subscriber = _Subscriber(user_id, collection, callback, predicate)
        with self._subscribers_lock:
            self._subscribers.append(subscriber)
            self._deliver(subscriber, self.snapshot(user_id, collection))

        def unsubscribe() -> None:
            with self._subscribers_lock:
                if subscriber in self._subscribers:
                    self._subscribers.remove(subscriber)

        return Subscription(unsubscribe)

    def publish(self, touched: set[tuple[str, Collection]]) -> None:
        """Push fresh snapshots for every (user_id, collection) touched by a write."""
        for user_id, collection in touched:
            with self._subscribers_lock:
                targets = [
                    s for s in self._subscribers
                    if s.user_id == user_id and s.collection == collection
                ]
                if not targets:
                    continue
                records = self.snapshot(user_id, collection)
                for subscriber in targets:
                    self._deliver(subscriber, records)

    def _deliver(self, subscriber: _Subscriber, records: list[Any]) -> None:
        if subscriber.predicate is not None:
            records = [r for r in records if subscriber.predicate(r)]
        try:
            subscriber.callback(list(records))
        except Exception:
            # A broken subscriber must not undo a committed write
            logger.exception(
                "subscriber_failed",
                user_id=subscriber.user_id,
                collection=subscriber.collection.value,
            )
