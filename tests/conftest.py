"""Shared pytest fixtures for financy tests."""

import tempfile
import os
from datetime import datetime
from decimal import Decimal
import pytest

from financy.database.factories import create_sqlite_database
from financy.database.gateway import MutationGateway
from financy.domain.auth import AuthService
from financy.domain.description import DescriptionService
from financy.domain.entities import Transaction, TransactionStatus, TransactionType
from financy.domain.group import GroupService
from financy.domain.installments import InstallmentService
from financy.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def gateway(temp_db):
    """Create a MutationGateway over the temporary database."""
    gw = MutationGateway(temp_db)
    yield gw
    gw.close()


@pytest.fixture
def auth_service(temp_db):
    """Create an AuthService with a temporary database."""
    return AuthService(temp_db)


@pytest.fixture
def transaction_service(temp_db, gateway):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db, gateway)


@pytest.fixture
def installment_service(temp_db, gateway):
    """Create an InstallmentService with a temporary database."""
    return InstallmentService(temp_db, gateway)


@pytest.fixture
def group_service(temp_db, gateway):
    """Create a GroupService with a temporary database."""
    return GroupService(temp_db, gateway)


@pytest.fixture
def description_service(temp_db, gateway):
    """Create a DescriptionService with a temporary database."""
    return DescriptionService(temp_db, gateway)


@pytest.fixture
def sample_user(auth_service):
    """Sign up (and sign in) a sample user."""
    return auth_service.sign_up("ana@example.com", "secret123")


@pytest.fixture
def other_user(temp_db):
    """A second account that is not signed in."""
    user_id = temp_db.create_user("bruno@example.com", "not-a-real-hash")
    return temp_db.get_user(user_id)


@pytest.fixture
def expense_group(group_service, sample_user):
    """Create a sample expense group."""
    group_id = group_service.create_group(sample_user.uid, "Casa", TransactionType.DESPESA).result()
    return group_service.get_group(sample_user.uid, group_id)


@pytest.fixture
def income_group(group_service, sample_user):
    """Create a sample income group."""
    group_id = group_service.create_group(sample_user.uid, "Trabalho", TransactionType.RECEITA).result()
    return group_service.get_group(sample_user.uid, group_id)


@pytest.fixture
def make_txn():
    """Build in-memory transactions for the pure aggregation and filter tests."""
    counter = {"n": 0}

    def _make(
        descricao="Item",
        valor="10.00",
        tipo=TransactionType.DESPESA,
        data=datetime(2024, 1, 15),
        status=TransactionStatus.PAGO,
        group_id=None,
        installment=None,
    ):
        counter["n"] += 1
        return Transaction(
            id=f"t{counter['n']}",
            user_id="u1",
            descricao=descricao,
            valor=Decimal(valor),
            tipo=TransactionType(tipo),
            data=data,
            status=TransactionStatus(status),
            group_id=group_id,
            installment=installment,
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
