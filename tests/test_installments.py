"""Tests for installment groups."""

from datetime import datetime
from decimal import Decimal

import pytest

from financy.domain.entities import TransactionStatus, TransactionType
from financy.domain.errors import (
    DisallowedOperationError,
    NotFoundError,
    NothingToDeleteError,
    ValidationError,
)
from financy.domain.installments import installment_value, plan_installments


class TestPlanInstallments:
    """Tests for the pure installment expansion."""

    def test_twelve_even_installments(self):
        drafts = plan_installments("u1", "Notebook", Decimal("1200.00"), 12, datetime(2024, 1, 15))

        assert len(drafts) == 12
        assert all(d.valor == Decimal("100.00") for d in drafts)
        assert drafts[0].descricao == "Notebook (1/12)"
        assert drafts[11].descricao == "Notebook (12/12)"
        assert [d.data for d in drafts[:3]] == [
            datetime(2024, 1, 15),
            datetime(2024, 2, 15),
            datetime(2024, 3, 15),
        ]
        assert drafts[11].data == datetime(2024, 12, 15)
        assert {d.installment.parcela_id for d in drafts} == {drafts[0].installment.parcela_id}
        assert all(d.tipo == TransactionType.DESPESA for d in drafts)
        assert all(d.status == TransactionStatus.PENDENTE for d in drafts)

    def test_rounding_residual_is_kept(self):
        drafts = plan_installments("u1", "Celular", Decimal("1000.00"), 3, datetime(2024, 1, 1))

        assert [d.valor for d in drafts] == [Decimal("333.33")] * 3
        assert sum(d.valor for d in drafts) == Decimal("999.99")

    def test_round_half_up(self):
        assert installment_value(Decimal("0.05"), 2) == Decimal("0.03")
        assert installment_value(Decimal("100.00"), 6) == Decimal("16.67")

    def test_single_installment(self):
        drafts = plan_installments("u1", "TV", Decimal("999.90"), 1, datetime(2024, 5, 20))

        assert len(drafts) == 1
        assert drafts[0].descricao == "TV (1/1)"
        assert drafts[0].valor == Decimal("999.90")
        assert drafts[0].installment.total_parcelas == 1

    def test_month_end_is_clamped(self):
        drafts = plan_installments("u1", "Curso", Decimal("300"), 3, datetime(2024, 1, 31))

        assert [d.data for d in drafts] == [
            datetime(2024, 1, 31),
            datetime(2024, 2, 29),
            datetime(2024, 3, 31),
        ]

    def test_given_parcela_id_is_used(self):
        drafts = plan_installments("u1", "Sofá", Decimal("900"), 3, datetime(2024, 1, 1), parcela_id="p-1")

        assert {d.installment.parcela_id for d in drafts} == {"p-1"}

    @pytest.mark.parametrize(
        "descricao,total,count",
        [
            ("", Decimal("100"), 2),
            ("Notebook", Decimal("0"), 2),
            ("Notebook", Decimal("-5"), 2),
            ("Notebook", Decimal("100"), 0),
        ],
    )
    def test_invalid_input_is_rejected(self, descricao, total, count):
        with pytest.raises(ValidationError):
            plan_installments("u1", descricao, total, count, datetime(2024, 1, 1))

    def test_missing_date_is_rejected(self):
        with pytest.raises(ValidationError):
            plan_installments("u1", "Notebook", Decimal("100"), 2, None)


class TestInstallmentService:
    """Tests for InstallmentService."""

    def test_create_installments(self, installment_service, sample_user, temp_db):
        submission = installment_service.create_installments(
            user_id=sample_user.uid,
            descricao="Notebook",
            valor_total=Decimal("1200.00"),
            count=12,
            first_date=datetime(2024, 1, 15),
        )
        ids = submission.future.result()

        assert len(ids) == 12
        members = installment_service.list_installments(sample_user.uid, submission.parcela_id)
        assert [m.installment.parcela_atual for m in members] == list(range(1, 13))
        assert all(m.status == TransactionStatus.PENDENTE for m in members)
        assert members[0].descricao == "Notebook (1/12)"
        assert members[0].valor == Decimal("100.00")
        assert members[2].data == datetime(2024, 3, 15)

    def test_create_with_expense_group(self, installment_service, sample_user, expense_group):
        submission = installment_service.create_installments(
            sample_user.uid, "Geladeira", Decimal("3000"), 10, datetime(2024, 2, 1), expense_group.id
        )
        submission.future.result()

        members = installment_service.list_installments(sample_user.uid, submission.parcela_id)
        assert {m.group_id for m in members} == {expense_group.id}

    def test_income_group_is_rejected(self, installment_service, sample_user, income_group, temp_db):
        with pytest.raises(ValidationError):
            installment_service.create_installments(
                sample_user.uid, "Geladeira", Decimal("3000"), 10, datetime(2024, 2, 1), income_group.id
            )

        assert temp_db.list_transactions(sample_user.uid) == []

    def test_unknown_group_is_rejected(self, installment_service, sample_user):
        with pytest.raises(NotFoundError):
            installment_service.create_installments(
                sample_user.uid, "Geladeira", Decimal("3000"), 10, datetime(2024, 2, 1), "missing"
            )

    def test_pay_one_installment(self, installment_service, sample_user):
        submission = installment_service.create_installments(
            sample_user.uid, "Notebook", Decimal("1200"), 12, datetime(2024, 1, 15)
        )
        ids = submission.future.result()

        installment_service.mark_installment_paid(sample_user.uid, ids[0]).result()
        # Paying twice changes nothing
        installment_service.mark_installment_paid(sample_user.uid, ids[0]).result()

        members = installment_service.list_installments(sample_user.uid, submission.parcela_id)
        assert members[0].status == TransactionStatus.PAGO
        assert all(m.status == TransactionStatus.PENDENTE for m in members[1:])

    def test_pay_rejects_plain_transaction(self, installment_service, transaction_service, sample_user):
        txn_id = transaction_service.create_transaction(
            sample_user.uid, "Aluguel", Decimal("1500"), TransactionType.DESPESA, datetime(2024, 1, 5)
        ).result()

        with pytest.raises(ValidationError):
            installment_service.mark_installment_paid(sample_user.uid, txn_id)

    def test_pay_unknown_transaction(self, installment_service, sample_user):
        with pytest.raises(NotFoundError):
            installment_service.mark_installment_paid(sample_user.uid, "missing")

    def test_delete_group_removes_all_members(self, installment_service, sample_user, temp_db):
        submission = installment_service.create_installments(
            sample_user.uid, "Notebook", Decimal("1200"), 12, datetime(2024, 1, 15)
        )
        ids = submission.future.result()
        installment_service.mark_installment_paid(sample_user.uid, ids[0]).result()

        installment_service.delete_installment_group(sample_user.uid, submission.parcela_id).result()

        assert temp_db.list_transactions(sample_user.uid, parcela_id=submission.parcela_id) == []

    def test_delete_keeps_other_groups(self, installment_service, sample_user, temp_db):
        first = installment_service.create_installments(
            sample_user.uid, "Notebook", Decimal("1200"), 12, datetime(2024, 1, 15)
        )
        second = installment_service.create_installments(
            sample_user.uid, "Celular", Decimal("1000"), 3, datetime(2024, 1, 15)
        )
        first.future.result()
        second.future.result()

        installment_service.delete_installment_group(sample_user.uid, first.parcela_id).result()

        remaining = temp_db.list_transactions(sample_user.uid)
        assert len(remaining) == 3
        assert {t.installment.parcela_id for t in remaining} == {second.parcela_id}

    def test_delete_empty_group(self, installment_service, sample_user):
        with pytest.raises(NothingToDeleteError):
            installment_service.delete_installment_group(sample_user.uid, "nothing-here")

    def test_members_cannot_be_edited_or_deleted_one_by_one(
        self, installment_service, transaction_service, sample_user
    ):
        submission = installment_service.create_installments(
            sample_user.uid, "Notebook", Decimal("1200"), 12, datetime(2024, 1, 15)
        )
        ids = submission.future.result()

        with pytest.raises(DisallowedOperationError):
            transaction_service.update_transaction(
                sample_user.uid, ids[3], "Notebook", Decimal("50"), datetime(2024, 4, 15)
            )
        with pytest.raises(DisallowedOperationError):
            transaction_service.delete_transaction(sample_user.uid, ids[3])

        member = transaction_service.get_transaction(sample_user.uid, ids[3])
        assert member.valor == Decimal("100.00")
