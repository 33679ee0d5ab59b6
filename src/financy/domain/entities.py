"""Domain model entities for financy.

These are pure data classes representing business concepts, independent of
the store's record layout. Installment metadata is carried as a separate
``Installment`` value so a transaction either has the whole set or none of it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class TransactionType(str, Enum):
    """Kind of a financial event."""

    RECEITA = "receita"
    DESPESA = "despesa"


class TransactionStatus(str, Enum):
    """Settlement state. Only settled transactions count toward balances."""

    PAGO = "pago"
    PENDENTE = "pendente"


class Collection(str, Enum):
    """Per-user document collections held by the store."""

    TRANSACTIONS = "transactions"
    GROUPS = "groups"
    DESCRIPTIONS = "descriptions"


@dataclass(frozen=True)
class User:
    """Authenticated user."""

    uid: str
    email: Optional[str] = None


@dataclass(frozen=True)
class Installment:
    """Installment metadata shared by the members of one parceled purchase."""

    parcela_id: str
    parcela_atual: int
    total_parcelas: int

    def __post_init__(self) -> None:
        if self.total_parcelas < 1:
            raise ValueError("total_parcelas must be at least 1")
        if not 1 <= self.parcela_atual <= self.total_parcelas:
            raise ValueError(
                f"parcela_atual {self.parcela_atual} outside 1..{self.total_parcelas}"
            )


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: str
    user_id: str
    descricao: str
    valor: Decimal
    tipo: TransactionType
    data: Optional[datetime]
    status: TransactionStatus = TransactionStatus.PAGO
    group_id: Optional[str] = None
    observacao: Optional[str] = None
    installment: Optional[Installment] = None

    @property
    def is_parcela(self) -> bool:
        return self.installment is not None

    @property
    def is_settled(self) -> bool:
        return self.status == TransactionStatus.PAGO


@dataclass(frozen=True)
class TransactionDraft:
    """A transaction that has not been assigned an ID by the store yet."""

    user_id: str
    descricao: str
    valor: Decimal
    tipo: TransactionType
    data: datetime
    status: TransactionStatus = TransactionStatus.PAGO
    group_id: Optional[str] = None
    observacao: Optional[str] = None
    installment: Optional[Installment] = None

    def to_record(self) -> dict[str, Any]:
        """Flatten into the persisted record shape."""
        record: dict[str, Any] = {
            "user_id": self.user_id,
            "descricao": self.descricao,
            "valor": self.valor,
            "tipo": self.tipo.value,
            "data": self.data,
            "status": self.status.value,
            "group_id": self.group_id,
            "observacao": self.observacao,
            "is_parcela": self.installment is not None,
        }
        if self.installment is not None:
            record["parcela_id"] = self.installment.parcela_id
            record["parcela_atual"] = self.installment.parcela_atual
            record["total_parcelas"] = self.installment.total_parcelas
        return record


@dataclass(frozen=True)
class Group:
    """User-defined category scoped to one transaction type."""

    id: str
    user_id: str
    name: str
    tipo: TransactionType


@dataclass(frozen=True)
class PredefinedDescription:
    """User-defined suggested label scoped to one transaction type."""

    id: str
    user_id: str
    name: str
    tipo: TransactionType


@dataclass(frozen=True)
class Totals:
    """Settled income, expense and their difference."""

    total_receitas: Decimal = Decimal("0")
    total_despesas: Decimal = Decimal("0")

    @property
    def saldo(self) -> Decimal:
        return self.total_receitas - self.total_despesas


@dataclass(frozen=True)
class MonthlyBucket:
    """Settled transactions of one calendar month."""

    year: int
    month: int
    total_receitas: Decimal
    total_despesas: Decimal
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def saldo(self) -> Decimal:
        return self.total_receitas - self.total_despesas
