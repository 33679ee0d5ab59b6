"""Store layer for financy application."""

from financy.database.base import Database, Subscription, WriteOperation
from financy.database.factories import create_sqlite_database
from financy.database.gateway import MutationGateway

__all__ = ["Database", "Subscription", "WriteOperation", "create_sqlite_database", "MutationGateway"]
