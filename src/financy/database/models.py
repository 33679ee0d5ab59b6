"""SQLAlchemy models for the financy store."""

from datetime import datetime, UTC
from uuid import uuid4
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


def new_id() -> str:
    """Opaque record identifier."""
    return uuid4().hex


class User(Base):
    """Registered user model."""

    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class AuthSession(Base):
    """Signed-in user for this store (at most one row)."""

    __tablename__ = "auth_session"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=True)


class Transaction(Base):
    """Transaction model.

    ``group_id`` is a weak reference: no foreign key, so deleting a group
    leaves it dangling.
    """

    __tablename__ = "transactions"

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    descricao = Column(String, nullable=False)
    valor = Column(Numeric(12, 2), nullable=False)
    tipo = Column(String(8), nullable=False)
    data = Column(DateTime, nullable=True)
    status = Column(String(8), nullable=False, default="pago")
    group_id = Column(String(32), nullable=True)
    observacao = Column(String, nullable=True)
    is_parcela = Column(Boolean, default=False, nullable=False)
    parcela_id = Column(String(32), nullable=True, index=True)
    parcela_atual = Column(Integer, nullable=True)
    total_parcelas = Column(Integer, nullable=True)


class Group(Base):
    """Transaction group model."""

    __tablename__ = "groups"

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    tipo = Column(String(8), nullable=False)


class PredefinedDescription(Base):
    """Predefined description model."""

    __tablename__ = "descriptions"

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    tipo = Column(String(8), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Writes run on the gateway worker thread, reads on the caller's
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
