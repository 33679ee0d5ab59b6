"""Fire-and-forget mutation gateway.

Writes are queued on a single worker thread and applied in submission
order. Callers get a ``Future`` they may ignore; failures are mapped to
domain errors, set on the future and pushed to the error listeners.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Iterable, Optional, Sequence

import structlog

from financy.database.base import Database, WriteOperation
from financy.domain.entities import Collection
from financy.domain.errors import DomainError, map_backend_error

logger = structlog.get_logger(__name__)

ErrorListener = Callable[[DomainError], None]


class MutationGateway:
    """Queue of create/update/delete requests against the store."""

    def __init__(self, db: Database, error_listeners: Optional[Iterable[ErrorListener]] = None):
        """Initialize mutation gateway.

        Args:
            db: Database instance
            error_listeners: Optional callbacks receiving every write failure
        """
        self.db = db
        self._error_listeners: list[ErrorListener] = list(error_listeners or [])
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="financy-writer")

    def add_error_listener(self, listener: ErrorListener) -> Callable[[], None]:
        """Register a failure callback. Returns a function removing it."""
        self._error_listeners.append(listener)

        def remove() -> None:
            if listener in self._error_listeners:
                self._error_listeners.remove(listener)

        return remove

    def create(self, collection: Collection, entity: dict[str, Any]) -> "Future[str]":
        """Queue a record creation; the future resolves to the new ID."""
        return self._submit(
            "create", self.db.insert, collection, entity,
            collection=collection.value, user_id=entity.get("user_id"),
        )

    def update(
        self, collection: Collection, user_id: str, entity_id: str, changes: dict[str, Any]
    ) -> "Future[None]":
        """Queue a partial update of one record."""
        return self._submit(
            "update", self.db.update, collection, user_id, entity_id, changes,
            collection=collection.value, user_id=user_id, entity_id=entity_id,
        )

    def delete(self, collection: Collection, user_id: str, entity_id: str) -> "Future[None]":
        """Queue deletion of one record."""
        return self._submit(
            "delete", self.db.delete, collection, user_id, entity_id,
            collection=collection.value, user_id=user_id, entity_id=entity_id,
        )

    def batch_write(self, operations: Sequence[WriteOperation]) -> "Future[list[Optional[str]]]":
        """Queue an atomic batch; the future resolves to one result per operation."""
        operations = list(operations)
        return self._submit(
            "batch_write", self.db.batch_write, operations,
            operations=len(operations),
        )

    def close(self, wait: bool = True) -> None:
        """Stop accepting writes, optionally waiting for queued ones."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "MutationGateway":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _submit(self, action: str, fn: Callable[..., Any], *args: Any, **log_fields: Any) -> Future:
        return self._executor.submit(self._run, action, fn, args, log_fields)

    def _run(self, action: str, fn: Callable[..., Any], args: tuple, log_fields: dict[str, Any]) -> Any:
        try:
            result = fn(*args)
        except Exception as exc:
            error = map_backend_error(exc)
            logger.warning("mutation_failed", action=action, error=str(error), **log_fields)
            for listener in list(self._error_listeners):
                try:
                    listener(error)
                except Exception:
                    logger.exception("error_listener_failed", action=action, **log_fields)
            if error is exc:
                raise
            raise error from exc
        logger.info("mutation_applied", action=action, **log_fields)
        return result
