"""Tests for TransactionService."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from financy.domain.entities import TransactionStatus, TransactionType
from financy.domain.errors import NotFoundError, ValidationError


def test_create_transaction(transaction_service, sample_user):
    """Test creating a transaction."""
    txn_id = transaction_service.create_transaction(
        user_id=sample_user.uid,
        descricao="  Salário  ",
        valor=Decimal("5000.00"),
        tipo=TransactionType.RECEITA,
        data=datetime(2024, 1, 5),
    ).result()

    txn = transaction_service.get_transaction(sample_user.uid, txn_id)
    assert txn.descricao == "Salário"
    assert txn.valor == Decimal("5000.00")
    assert txn.tipo == TransactionType.RECEITA
    assert txn.status == TransactionStatus.PAGO
    assert txn.data == datetime(2024, 1, 5)
    assert not txn.is_parcela


def test_create_pending_transaction(transaction_service, sample_user):
    txn_id = transaction_service.create_transaction(
        sample_user.uid, "Luz", Decimal("120"), TransactionType.DESPESA, date(2024, 1, 10),
        status=TransactionStatus.PENDENTE,
    ).result()

    txn = transaction_service.get_transaction(sample_user.uid, txn_id)
    assert txn.status == TransactionStatus.PENDENTE
    # Plain dates are stored as midnight
    assert txn.data == datetime(2024, 1, 10)


@pytest.mark.parametrize(
    "descricao,valor,tipo,data",
    [
        ("", Decimal("10"), TransactionType.DESPESA, datetime(2024, 1, 1)),
        ("   ", Decimal("10"), TransactionType.DESPESA, datetime(2024, 1, 1)),
        ("Luz", Decimal("0"), TransactionType.DESPESA, datetime(2024, 1, 1)),
        ("Luz", Decimal("-1"), TransactionType.DESPESA, datetime(2024, 1, 1)),
        ("Luz", Decimal("10"), "transferencia", datetime(2024, 1, 1)),
        ("Luz", Decimal("10"), TransactionType.DESPESA, None),
    ],
)
def test_create_rejects_invalid_input(transaction_service, sample_user, temp_db, descricao, valor, tipo, data):
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(sample_user.uid, descricao, valor, tipo, data)

    assert temp_db.list_transactions(sample_user.uid) == []


def test_create_checks_group_type(transaction_service, sample_user, income_group, expense_group):
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(
            sample_user.uid, "Luz", Decimal("10"), TransactionType.DESPESA, datetime(2024, 1, 1),
            group_id=income_group.id,
        )

    txn_id = transaction_service.create_transaction(
        sample_user.uid, "Luz", Decimal("10"), TransactionType.DESPESA, datetime(2024, 1, 1),
        group_id=expense_group.id,
    ).result()
    assert transaction_service.get_transaction(sample_user.uid, txn_id).group_id == expense_group.id


def test_list_transactions_most_recent_first(transaction_service, sample_user):
    for day in (3, 1, 2):
        transaction_service.create_transaction(
            sample_user.uid, f"Dia {day}", Decimal("1"), TransactionType.DESPESA, datetime(2024, 1, day)
        ).result()

    txns = transaction_service.list_transactions(sample_user.uid)

    assert [t.descricao for t in txns] == ["Dia 3", "Dia 2", "Dia 1"]


def test_update_transaction(transaction_service, sample_user, expense_group):
    txn_id = transaction_service.create_transaction(
        sample_user.uid, "Luz", Decimal("120"), TransactionType.DESPESA, datetime(2024, 1, 10),
        observacao="conta de janeiro",
    ).result()

    transaction_service.update_transaction(
        sample_user.uid, txn_id, "Energia", Decimal("130.50"), datetime(2024, 1, 12),
        group_id=expense_group.id,
    ).result()

    txn = transaction_service.get_transaction(sample_user.uid, txn_id)
    assert txn.descricao == "Energia"
    assert txn.valor == Decimal("130.50")
    assert txn.data == datetime(2024, 1, 12)
    assert txn.group_id == expense_group.id
    # Full replacement: omitted notes are cleared
    assert txn.observacao is None
    assert txn.tipo == TransactionType.DESPESA
    assert txn.status == TransactionStatus.PAGO


def test_update_rejects_invalid_amount(transaction_service, sample_user):
    txn_id = transaction_service.create_transaction(
        sample_user.uid, "Luz", Decimal("120"), TransactionType.DESPESA, datetime(2024, 1, 10)
    ).result()

    with pytest.raises(ValidationError):
        transaction_service.update_transaction(
            sample_user.uid, txn_id, "Luz", Decimal("0"), datetime(2024, 1, 10)
        )


def test_update_missing_transaction(transaction_service, sample_user):
    with pytest.raises(NotFoundError):
        transaction_service.update_transaction(
            sample_user.uid, "missing", "Luz", Decimal("1"), datetime(2024, 1, 10)
        )


def test_mark_paid(transaction_service, sample_user):
    txn_id = transaction_service.create_transaction(
        sample_user.uid, "Luz", Decimal("120"), TransactionType.DESPESA, datetime(2024, 1, 10),
        status=TransactionStatus.PENDENTE,
    ).result()

    transaction_service.mark_paid(sample_user.uid, txn_id).result()
    transaction_service.mark_paid(sample_user.uid, txn_id).result()

    assert transaction_service.get_transaction(sample_user.uid, txn_id).status == TransactionStatus.PAGO


def test_delete_transaction(transaction_service, sample_user):
    txn_id = transaction_service.create_transaction(
        sample_user.uid, "Luz", Decimal("120"), TransactionType.DESPESA, datetime(2024, 1, 10)
    ).result()

    transaction_service.delete_transaction(sample_user.uid, txn_id).result()

    assert transaction_service.get_transaction(sample_user.uid, txn_id) is None
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction(sample_user.uid, txn_id)


def test_transactions_are_scoped_by_user(transaction_service, sample_user, other_user):
    txn_id = transaction_service.create_transaction(
        sample_user.uid, "Luz", Decimal("120"), TransactionType.DESPESA, datetime(2024, 1, 10)
    ).result()

    assert transaction_service.get_transaction(other_user.uid, txn_id) is None
    assert transaction_service.list_transactions(other_user.uid) == []
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction(other_user.uid, txn_id)


def test_update_keeps_dangling_group(transaction_service, group_service, sample_user, expense_group):
    txn_id = transaction_service.create_transaction(
        sample_user.uid, "Aluguel", Decimal("1500"), TransactionType.DESPESA, datetime(2024, 1, 5),
        group_id=expense_group.id,
    ).result()
    group_service.delete_group(sample_user.uid, expense_group.id).result()

    transaction_service.update_transaction(
        sample_user.uid, txn_id, "Aluguel", Decimal("1600"), datetime(2024, 1, 5),
        group_id=expense_group.id,
    ).result()

    txn = transaction_service.get_transaction(sample_user.uid, txn_id)
    assert txn.valor == Decimal("1600.00")
    assert txn.group_id == expense_group.id


def test_update_to_another_missing_group_is_rejected(transaction_service, sample_user):
    txn_id = transaction_service.create_transaction(
        sample_user.uid, "Aluguel", Decimal("1500"), TransactionType.DESPESA, datetime(2024, 1, 5)
    ).result()

    with pytest.raises(NotFoundError):
        transaction_service.update_transaction(
            sample_user.uid, txn_id, "Aluguel", Decimal("1600"), datetime(2024, 1, 5),
            group_id="missing",
        )
