"""Live dashboard over a user's store snapshots.

The dashboard subscribes to the transaction and group collections. Every
snapshot replaces the working set and all derived values are rebuilt from
scratch; nothing is carried over between snapshots.
"""

import threading
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Sequence

from financy.database.base import Database, Subscription
from financy.domain.aggregation import (
    compute_balance,
    compute_totals,
    group_by_month,
    group_name,
    sort_by_date_descending,
)
from financy.domain.entities import (
    Collection,
    Group,
    MonthlyBucket,
    Totals,
    Transaction,
    TransactionType,
)
from financy.domain.filters import Report, ReportFilter, build_report

StateListener = Callable[["DashboardState"], None]


@dataclass(frozen=True)
class DashboardState:
    """Everything the dashboard shows, derived from one pair of snapshots."""

    transactions: tuple[Transaction, ...] = ()
    groups: tuple[Group, ...] = ()
    totals: Totals = field(default_factory=Totals)
    balance: Decimal = Decimal("0")
    months: tuple[MonthlyBucket, ...] = ()
    recent: tuple[Transaction, ...] = ()

    def group_name(self, group_id: Optional[str]) -> Optional[str]:
        return group_name(self.groups, group_id)

    def groups_for(self, tipo: TransactionType) -> list[Group]:
        return [g for g in self.groups if g.tipo == tipo]


def build_dashboard_state(
    transactions: Sequence[Transaction],
    groups: Sequence[Group],
    recent_limit: int = 5,
) -> DashboardState:
    """Derive a full dashboard state from raw snapshots."""
    ordered = sort_by_date_descending(transactions)
    return DashboardState(
        transactions=tuple(ordered),
        groups=tuple(groups),
        totals=compute_totals(ordered),
        balance=compute_balance(ordered),
        months=tuple(group_by_month(ordered)),
        recent=tuple(ordered[:recent_limit]),
    )


class Dashboard:
    """Snapshot consumer keeping a user's derived state current."""

    def __init__(self, db: Database, user_id: str, recent_limit: int = 5):
        self.db = db
        self.user_id = user_id
        self.recent_limit = recent_limit
        self._transactions: list[Transaction] = []
        self._groups: list[Group] = []
        self._state = DashboardState()
        self._lock = threading.Lock()
        self._listeners: list[StateListener] = []
        self._subscriptions: list[Subscription] = []

    @property
    def state(self) -> DashboardState:
        return self._state

    def start(self) -> "Dashboard":
        """Subscribe to the user's collections; the first snapshots arrive immediately."""
        if not self._subscriptions:
            self._subscriptions = [
                self.db.subscribe(self.user_id, Collection.GROUPS, self._on_groups),
                self.db.subscribe(self.user_id, Collection.TRANSACTIONS, self._on_transactions),
            ]
        return self

    def stop(self) -> None:
        """Stop receiving snapshots."""
        for subscription in self._subscriptions:
            subscription.close()
        self._subscriptions = []

    def __enter__(self) -> "Dashboard":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """Get called with every new state. Returns a function removing the listener."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def report(self, report_filter: ReportFilter, today: Optional[date] = None) -> Report:
        """Build a filtered report from the current working set."""
        return build_report(self._state.transactions, report_filter, today)

    def _on_transactions(self, snapshot: list[Transaction]) -> None:
        with self._lock:
            self._transactions = list(snapshot)
            self._recompute()

    def _on_groups(self, snapshot: list[Group]) -> None:
        with self._lock:
            self._groups = list(snapshot)
            self._recompute()

    def _recompute(self) -> None:
        self._state = build_dashboard_state(self._transactions, self._groups, self.recent_limit)
        for listener in list(self._listeners):
            listener(self._state)
