"""Tests for the financing ledger."""

from datetime import date
from decimal import Decimal
from typing import Any

import pytest

from financing_core.clock import FixedClock
from financing_core.config import LedgerConfig
from financing_core.engine.schedule import add_months
from financing_core.exceptions import (
    FinancingValidationError,
    NoPendingInstallmentsError,
    PersistenceError,
    UnsupportedAmortizationSystemError,
)
from financing_core.models import AmortizationSystem, Financing, InstallmentStatus, LoanType, Strategy
from financing_core.persistence import InMemoryFinancingStore
from financing_core.store import FinancingLedger
from financing_core.transactions import FINANCING_CATEGORY, InMemoryTransactionService
from financing_core.validation import FinancingInput


class FailingStore:
    """Store whose saves always fail."""

    namespace = "failing"

    def load(self) -> list[Financing]:
        return []

    def save(self, financings: list[Financing]) -> None:
        raise PersistenceError("disk full")


class TestAddFinancing:
    def test_creates_schedule(self, ledger: FinancingLedger, price_payload: dict[str, Any]) -> None:
        financing = ledger.add_financing(price_payload)

        assert financing.financing_id == "fin-test-001"
        assert financing.system == AmortizationSystem.PRICE
        assert financing.loan_type == LoanType.VEHICLE
        assert len(financing.installments) == 12
        assert financing.installments[0].payment == Decimal("88.85")
        assert financing.created_at is not None

    def test_statuses_refreshed_on_creation(self, ledger: FinancingLedger, price_payload: dict[str, Any]) -> None:
        financing = ledger.add_financing(price_payload)
        statuses = [i.status for i in financing.installments]

        assert statuses[:4] == [InstallmentStatus.OVERDUE] * 4
        assert statuses[4] == InstallmentStatus.PENDING

    def test_already_paid_installments(self, ledger: FinancingLedger, price_payload: dict[str, Any]) -> None:
        financing = ledger.add_financing({**price_payload, "paid_installments": 2, "anticipated_installments": 1})
        installments = financing.installments

        assert [i.status for i in installments[:3]] == [InstallmentStatus.PAID] * 3
        assert all(i.paid_date == i.due_date for i in installments[:3])
        assert installments[3].status == InstallmentStatus.OVERDUE
        assert installments[4].status == InstallmentStatus.PENDING
        assert financing.paid_installments == 2
        assert financing.anticipated_installments == 1

    def test_persists(
        self,
        ledger: FinancingLedger,
        store: InMemoryFinancingStore,
        price_payload: dict[str, Any],
    ) -> None:
        ledger.add_financing(price_payload)

        assert store.save_count == 1
        assert store.data[store.namespace][0]["financing_id"] == "fin-test-001"

    def test_missing_loan_type_defaults_to_other(
        self, ledger: FinancingLedger, price_payload: dict[str, Any]
    ) -> None:
        payload = {k: v for k, v in price_payload.items() if k != "loan_type"}
        assert ledger.add_financing(payload).loan_type == LoanType.OTHER

    @pytest.mark.parametrize(
        "override",
        [
            {"name": ""},
            {"principal": 0},
            {"principal": "-5"},
            {"annual_rate": 0},
            {"term_months": 0},
            {"term_months": "doze"},
            {"start_date": "15/01/2024"},
            {"loan_type": "boat"},
        ],
    )
    def test_invalid_payload_not_persisted(
        self,
        ledger: FinancingLedger,
        store: InMemoryFinancingStore,
        price_payload: dict[str, Any],
        override: dict[str, Any],
    ) -> None:
        with pytest.raises(FinancingValidationError):
            ledger.add_financing({**price_payload, **override})

        assert ledger.list_financings() == []
        assert store.save_count == 0

    def test_accepts_prepared_input(self, ledger: FinancingLedger, store: InMemoryFinancingStore) -> None:
        terms = FinancingInput(
            name="Moto",
            loan_type=LoanType.VEHICLE,
            principal=Decimal("1000"),
            annual_rate=Decimal("12"),
            term_months=12,
            system=AmortizationSystem.PRICE,
            start_date=date(2024, 6, 1),
        )

        financing = ledger.add_financing(terms)

        assert financing.name == "Moto"
        assert len(financing.installments) == 12
        assert store.save_count == 1

    def test_invalid_prepared_input_not_persisted(
        self, ledger: FinancingLedger, store: InMemoryFinancingStore
    ) -> None:
        with pytest.raises(FinancingValidationError):
            ledger.add_financing(
                FinancingInput(
                    name="",
                    loan_type=LoanType.OTHER,
                    principal=Decimal("0"),
                    annual_rate=Decimal("-12"),
                    term_months=12,
                    system="PRICE",
                    start_date=date(2024, 1, 15),
                )
            )

        assert ledger.list_financings() == []
        assert store.save_count == 0

    def test_unsupported_system(
        self,
        ledger: FinancingLedger,
        store: InMemoryFinancingStore,
        price_payload: dict[str, Any],
    ) -> None:
        with pytest.raises(UnsupportedAmortizationSystemError):
            ledger.add_financing({**price_payload, "system": "GERMAN"})

        assert ledger.list_financings() == []
        assert store.save_count == 0

    def test_default_id_factory(self, store: InMemoryFinancingStore, clock: FixedClock, price_payload) -> None:
        ledger = FinancingLedger(store, clock=clock)
        assert ledger.add_financing(price_payload).financing_id.startswith("fin_")


class TestQueries:
    def test_get_and_list(self, ledger: FinancingLedger, price_payload, sac_payload) -> None:
        first = ledger.add_financing(price_payload)
        second = ledger.add_financing(sac_payload)

        assert ledger.get_financing(second.financing_id) is second
        assert ledger.get_financing("missing") is None
        assert [f.financing_id for f in ledger.list_financings()] == [first.financing_id, second.financing_id]

    def test_summary(self, ledger: FinancingLedger, price_payload) -> None:
        financing = ledger.add_financing({**price_payload, "paid_installments": 3})
        summary = ledger.get_summary(financing.financing_id)

        assert summary is not None
        assert summary.paid_count == 3
        assert summary.overdue_count == 1
        assert summary.progress_percent == Decimal("25.00")
        assert ledger.get_summary("missing") is None

    def test_overdue_count_and_refresh(self, ledger: FinancingLedger, clock: FixedClock, price_payload) -> None:
        ledger.add_financing(price_payload)
        assert ledger.overdue_count() == 4

        clock.advance(1)
        ledger.refresh_statuses()

        assert ledger.overdue_count() == 5

    def test_upcoming_installments(self, ledger: FinancingLedger, price_payload, sac_payload) -> None:
        ledger.add_financing({**price_payload, "start_date": "2024-06-20"})
        ledger.add_financing({**sac_payload, "start_date": "2024-06-10"})

        upcoming = ledger.upcoming_installments()

        assert len(upcoming) == 5
        assert upcoming[0].financing_name == "Casa"
        assert upcoming[1].financing_name == "Carro"
        assert [u.due_date for u in upcoming] == sorted(u.due_date for u in upcoming)

    def test_next_installments(self, ledger: FinancingLedger, price_payload) -> None:
        financing = ledger.add_financing({**price_payload, "paid_installments": 4})

        assert [i.number for i in ledger.next_installments(financing.financing_id)] == [5, 6, 7]
        assert ledger.next_installments("missing") == []

    def test_explicit_zero_count(self, ledger: FinancingLedger, price_payload) -> None:
        financing = ledger.add_financing(price_payload)

        assert ledger.upcoming_installments(0) == []
        assert ledger.next_installments(financing.financing_id, 0) == []

    def test_counts_default_to_config(self, store, clock: FixedClock, price_payload) -> None:
        ledger = FinancingLedger(store, clock=clock, config=LedgerConfig(upcoming_count=2, next_count=4))
        financing = ledger.add_financing(price_payload)

        assert len(ledger.upcoming_installments()) == 2
        assert len(ledger.next_installments(financing.financing_id)) == 4

    def test_total_remaining_balance(self, ledger: FinancingLedger, price_payload, sac_payload) -> None:
        ledger.add_financing(price_payload)
        ledger.add_financing({**sac_payload, "paid_installments": 12})

        # Overdue #1-#4 are skipped; the balance is read from pending #5
        assert ledger.total_remaining_balance() == Decimal("679.84")


class TestUpdateFinancing:
    def test_unknown_id(self, ledger: FinancingLedger) -> None:
        assert ledger.update_financing("missing", {"name": "x"}) is False

    def test_metadata_keeps_history(self, ledger: FinancingLedger, price_payload) -> None:
        financing = ledger.add_financing({**price_payload, "paid_installments": 2})

        assert ledger.update_financing(financing.financing_id, {"name": "Carro novo", "cet_rate": "14.5"})

        updated = ledger.get_financing(financing.financing_id)
        assert updated.name == "Carro novo"
        assert updated.cet_rate == Decimal("14.5")
        assert updated.installments[0].status == InstallmentStatus.PAID

    def test_schedule_change_regenerates(self, ledger: FinancingLedger, price_payload) -> None:
        financing = ledger.add_financing({**price_payload, "paid_installments": 2})

        ledger.update_financing(financing.financing_id, {"annual_rate": "24", "term_months": 6})

        updated = ledger.get_financing(financing.financing_id)
        assert len(updated.installments) == 6
        assert updated.annual_rate == Decimal("24")
        assert InstallmentStatus.PAID not in {i.status for i in updated.installments}

    def test_same_value_keeps_history(self, ledger: FinancingLedger, price_payload) -> None:
        financing = ledger.add_financing({**price_payload, "paid_installments": 2})

        ledger.update_financing(financing.financing_id, {"principal": "1000.00", "system": "PRICE"})

        updated = ledger.get_financing(financing.financing_id)
        assert updated.installments[0].status == InstallmentStatus.PAID

    def test_rejects_unknown_fields(self, ledger: FinancingLedger, store, price_payload) -> None:
        financing = ledger.add_financing(price_payload)

        with pytest.raises(FinancingValidationError, match="installments"):
            ledger.update_financing(financing.financing_id, {"installments": []})
        assert store.save_count == 1

    def test_rejects_unsupported_system(self, ledger: FinancingLedger, price_payload) -> None:
        financing = ledger.add_financing(price_payload)

        with pytest.raises(UnsupportedAmortizationSystemError):
            ledger.update_financing(financing.financing_id, {"system": "GERMAN"})
        assert ledger.get_financing(financing.financing_id).system == AmortizationSystem.PRICE


class TestDeleteFinancing:
    def test_delete(self, ledger: FinancingLedger, store, price_payload) -> None:
        financing = ledger.add_financing(price_payload)

        assert ledger.delete_financing(financing.financing_id) is True
        assert ledger.list_financings() == []
        assert store.data[store.namespace] == []
        assert ledger.delete_financing(financing.financing_id) is False


class TestPayments:
    def test_mark_paid_defaults_to_today(self, ledger: FinancingLedger, today: date, price_payload) -> None:
        financing = ledger.add_financing(price_payload)

        assert ledger.mark_installment_paid(financing.financing_id, 1)

        installment = ledger.get_financing(financing.financing_id).get_installment(1)
        assert installment.status == InstallmentStatus.PAID
        assert installment.paid_date == today

    def test_mark_paid_explicit_date(self, ledger: FinancingLedger, price_payload) -> None:
        financing = ledger.add_financing(price_payload)
        ledger.mark_installment_paid(financing.financing_id, 2, paid_date=date(2024, 3, 10))

        assert ledger.get_financing(financing.financing_id).get_installment(2).paid_date == date(2024, 3, 10)

    def test_mark_paid_unknown(self, ledger: FinancingLedger, store, price_payload) -> None:
        financing = ledger.add_financing(price_payload)

        assert ledger.mark_installment_paid("missing", 1) is False
        assert ledger.mark_installment_paid(financing.financing_id, 99) is False
        assert store.save_count == 1

    def test_paid_survives_refresh(self, ledger: FinancingLedger, clock: FixedClock, price_payload) -> None:
        financing = ledger.add_financing(price_payload)
        ledger.mark_installment_paid(financing.financing_id, 6)

        clock.advance(365)
        ledger.refresh_statuses()

        assert ledger.get_financing(financing.financing_id).get_installment(6).status == InstallmentStatus.PAID

    def test_link_transaction(self, ledger: FinancingLedger, today: date, price_payload) -> None:
        financing = ledger.add_financing(price_payload)

        assert ledger.link_transaction(financing.financing_id, 5, "tx-123")

        installment = ledger.get_financing(financing.financing_id).get_installment(5)
        assert installment.linked_transaction_id == "tx-123"
        assert installment.paid_date == today

    def test_settle_creates_expense(self, ledger: FinancingLedger, today: date, price_payload) -> None:
        transactions = InMemoryTransactionService(seed=42)
        financing = ledger.add_financing(price_payload)

        assert ledger.settle_installment(financing.financing_id, 5, transactions)

        installment = ledger.get_financing(financing.financing_id).get_installment(5)
        expense = transactions.expenses[installment.linked_transaction_id]
        assert expense.amount == Decimal("88.85")
        assert expense.description == "Pagamento Parcela 5/12 - Carro"
        assert expense.category == FINANCING_CATEGORY
        assert expense.date == today

    def test_settle_without_service(self, ledger: FinancingLedger, price_payload) -> None:
        financing = ledger.add_financing(price_payload)

        assert ledger.settle_installment(financing.financing_id, 1)
        assert ledger.get_financing(financing.financing_id).get_installment(1).linked_transaction_id is None

    def test_settle_unknown_creates_no_expense(self, ledger: FinancingLedger, price_payload) -> None:
        transactions = InMemoryTransactionService()
        financing = ledger.add_financing(price_payload)

        assert ledger.settle_installment(financing.financing_id, 42, transactions) is False
        assert transactions.expenses == {}


class TestExtraAmortization:
    def test_simulate_does_not_commit(self, ledger: FinancingLedger, store, price_payload) -> None:
        financing = ledger.add_financing(price_payload)

        result = ledger.simulate_extra_amortization(financing.financing_id, "500", "reduce_term")

        assert result is not None
        assert result.new_term == 6
        assert len(ledger.get_financing(financing.financing_id).installments) == 12
        assert store.save_count == 1
        assert ledger.simulate_extra_amortization("missing", "500", "reduce_term") is None

    def test_compare_scenarios(self, ledger: FinancingLedger, price_payload) -> None:
        financing = ledger.add_financing(price_payload)

        comparison = ledger.compare_scenarios(financing.financing_id, Decimal("500"))

        assert comparison is not None
        assert comparison.current.term == 12
        assert ledger.compare_scenarios("missing", Decimal("500")) is None

    def test_apply_keeps_history_and_renumbers(self, ledger: FinancingLedger, today: date, price_payload) -> None:
        financing = ledger.add_financing({**price_payload, "paid_installments": 3})

        result = ledger.apply_extra_amortization(financing.financing_id, Decimal("500"), Strategy.REDUCE_TERM)

        updated = ledger.get_financing(financing.financing_id)
        installments = updated.installments
        assert result is not None
        assert [i.status for i in installments[:3]] == [InstallmentStatus.PAID] * 3
        assert [i.number for i in installments] == list(range(1, len(installments) + 1))
        assert installments[3].due_date == add_months(today, 1)
        assert all(i.status == InstallmentStatus.PENDING for i in installments[3:])
        assert len(installments) < 12
        assert updated.term_months == len(installments)
        assert result.new_term == len(installments)
        assert result.savings.months == 12 - len(installments)

    def test_apply_reduce_payment(self, ledger: FinancingLedger, price_payload) -> None:
        financing = ledger.add_financing(price_payload)

        result = ledger.apply_extra_amortization(financing.financing_id, "500", "reduce_payment")

        updated = ledger.get_financing(financing.financing_id)
        assert result.new_term == 12
        assert updated.installments[0].payment == Decimal("44.42")

    def test_apply_records_expense(self, ledger: FinancingLedger, price_payload) -> None:
        transactions = InMemoryTransactionService(seed=7)
        financing = ledger.add_financing(price_payload)

        result = ledger.apply_extra_amortization(financing.financing_id, "500", "reduce_term", transactions)

        expense = transactions.expenses[result.transaction_id]
        assert expense.amount == Decimal("500")
        assert expense.description == "Amortização Extra - Carro"

    def test_apply_payoff(self, ledger: FinancingLedger, price_payload) -> None:
        financing = ledger.add_financing({**price_payload, "paid_installments": 6})

        result = ledger.apply_extra_amortization(financing.financing_id, "5000", "reduce_term")

        updated = ledger.get_financing(financing.financing_id)
        assert result.new_term == 6
        assert len(updated.installments) == 6
        assert all(i.is_paid for i in updated.installments)

    def test_apply_unknown(self, ledger: FinancingLedger) -> None:
        assert ledger.apply_extra_amortization("missing", "500", "reduce_term") is None

    def test_apply_with_nothing_pending(self, ledger: FinancingLedger, store, price_payload) -> None:
        financing = ledger.add_financing({**price_payload, "paid_installments": 12})

        with pytest.raises(NoPendingInstallmentsError):
            ledger.apply_extra_amortization(financing.financing_id, "500", "reduce_term")

        assert len(ledger.get_financing(financing.financing_id).installments) == 12
        assert store.save_count == 1

    def test_apply_invalid_amount(self, ledger: FinancingLedger, price_payload) -> None:
        financing = ledger.add_financing(price_payload)

        with pytest.raises(FinancingValidationError):
            ledger.apply_extra_amortization(financing.financing_id, "0", "reduce_term")


class TestPersistence:
    def test_reload_restores_collection(
        self,
        ledger: FinancingLedger,
        store: InMemoryFinancingStore,
        clock: FixedClock,
        price_payload,
    ) -> None:
        financing = ledger.add_financing(price_payload)
        ledger.mark_installment_paid(financing.financing_id, 1, transaction_id="tx-1")

        reloaded = FinancingLedger(store, clock=clock)
        restored = reloaded.get_financing(financing.financing_id)

        assert restored == ledger.get_financing(financing.financing_id)
        assert restored.get_installment(1).linked_transaction_id == "tx-1"

    def test_reload_refreshes_statuses(
        self,
        ledger: FinancingLedger,
        store: InMemoryFinancingStore,
        price_payload,
    ) -> None:
        ledger.add_financing(price_payload)

        reloaded = FinancingLedger(store, clock=FixedClock(date(2025, 6, 1)))

        statuses = {i.status for i in reloaded.list_financings()[0].installments}
        assert statuses == {InstallmentStatus.OVERDUE}

    def test_failed_save_keeps_memory_state(self, clock: FixedClock, price_payload) -> None:
        ledger = FinancingLedger(FailingStore(), clock=clock)

        with pytest.raises(PersistenceError):
            ledger.add_financing(price_payload)

        assert len(ledger.list_financings()) == 1
