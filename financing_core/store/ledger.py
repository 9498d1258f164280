"""Financing ledger: the stateful owner of the financing collection."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Mapping

from faker import Faker

from financing_core.clock import Clock, SystemClock
from financing_core.config import LedgerConfig
from financing_core.engine.schedule import generate_schedule, parse_system, to_decimal
from financing_core.engine.simulation import compare_scenarios, simulate_extra_amortization
from financing_core.engine.status import refresh_financing, refresh_statuses
from financing_core.engine.summary import (
    next_installments,
    overdue_count,
    summarize,
    total_remaining_balance,
    upcoming_installments,
)
from financing_core.exceptions import NoPendingInstallmentsError, PersistenceError
from financing_core.models.enums import InstallmentStatus, Strategy
from financing_core.models.financing import Financing, Installment
from financing_core.models.results import (
    ExtraAmortizationResult,
    FinancingSummary,
    ScenarioComparison,
    SimulationResult,
    UpcomingInstallment,
)
from financing_core.persistence.base import FinancingStore
from financing_core.transactions import (
    ExpenseRequest,
    TransactionService,
    extra_amortization_description,
    installment_description,
)
from financing_core.validation import SCHEDULE_FIELDS, FinancingInput, parse_financing_input, parse_updates

logger = logging.getLogger(__name__)


def _default_id_factory() -> Callable[[], str]:
    fake = Faker()
    return lambda: f"fin_{fake.uuid4()}"


def renumber_after(installments: list[Installment], last_number: int) -> list[Installment]:
    """Shift a freshly generated sub-schedule so it continues after ``last_number``."""
    return [replace(installment, number=installment.number + last_number) for installment in installments]


class FinancingLedger:
    """In-memory collection of financings with write-through persistence.

    Every mutating operation updates the collection first and then saves the
    whole collection to the store. A failed save raises ``PersistenceError``
    and the in-memory change is kept.

    Parameters
    ----------
    store : FinancingStore
        Persistent store the collection is loaded from and saved to.
    clock : Clock | None
        Source of today's date (default: system clock).
    id_factory : Callable[[], str] | None
        Generates financing ids (default: ``fin_<uuid4>``).
    config : LedgerConfig | None
        Defaults for read paths.
    """

    def __init__(
        self,
        store: FinancingStore,
        clock: Clock | None = None,
        id_factory: Callable[[], str] | None = None,
        config: LedgerConfig | None = None,
    ) -> None:
        self.store = store
        self.clock = clock or SystemClock()
        self.config = config or LedgerConfig()
        self._new_id = id_factory or _default_id_factory()
        self.financings: list[Financing] = store.load()
        self.refresh_statuses()
        logger.info("Loaded %d financings", len(self.financings))

    # Internal helpers
    def _today(self) -> date:
        return self.clock.today()

    def _index(self, financing_id: str) -> int | None:
        for index, financing in enumerate(self.financings):
            if financing.financing_id == financing_id:
                return index
        return None

    def _persist(self, action: str, financing_id: str) -> None:
        try:
            self.store.save(self.financings)
        except PersistenceError:
            logger.error(
                "Failed to persist after %s of %s",
                action,
                financing_id,
                extra={"financing_id": financing_id},
            )
            raise

    # Queries
    def get_financing(self, financing_id: str) -> Financing | None:
        index = self._index(financing_id)
        return None if index is None else self.financings[index]

    def list_financings(self) -> list[Financing]:
        return list(self.financings)

    def get_summary(self, financing_id: str) -> FinancingSummary | None:
        financing = self.get_financing(financing_id)
        if financing is None:
            return None
        return summarize(financing.installments, financing.principal)

    def total_remaining_balance(self) -> Decimal:
        return total_remaining_balance(self.financings)

    def upcoming_installments(self, count: int | None = None) -> list[UpcomingInstallment]:
        if count is None:
            count = self.config.upcoming_count
        return upcoming_installments(self.financings, count)

    def next_installments(self, financing_id: str, count: int | None = None) -> list[Installment]:
        financing = self.get_financing(financing_id)
        if financing is None:
            return []
        if count is None:
            count = self.config.next_count
        return next_installments(financing.installments, count)

    def overdue_count(self) -> int:
        return overdue_count(self.financings)

    def refresh_statuses(self) -> None:
        """Recompute pending/overdue for every financing against today."""
        today = self._today()
        self.financings = [refresh_financing(f, today) for f in self.financings]

    # Commands
    def add_financing(self, data: Mapping[str, Any] | FinancingInput) -> Financing:
        """Validate, schedule and store a new financing.

        The first ``paid_installments + anticipated_installments`` entries are
        recorded as already paid on their due date.

        Raises
        ------
        FinancingValidationError
            If the payload is malformed.
        UnsupportedAmortizationSystemError
            If ``system`` is not PRICE or SAC.
        """
        terms = data if isinstance(data, FinancingInput) else parse_financing_input(data)
        system = parse_system(terms.system)

        installments = generate_schedule(
            system,
            terms.principal,
            terms.annual_rate,
            terms.term_months,
            terms.start_date,
        )

        already_paid = min(terms.paid_installments + terms.anticipated_installments, len(installments))
        for installment in installments[:already_paid]:
            installment.status = InstallmentStatus.PAID
            installment.paid_date = installment.due_date

        financing = Financing(
            financing_id=self._new_id(),
            name=terms.name,
            loan_type=terms.loan_type,
            principal=terms.principal,
            annual_rate=terms.annual_rate,
            term_months=terms.term_months,
            system=system,
            start_date=terms.start_date,
            installments=refresh_statuses(installments, self._today()),
            cet_rate=terms.cet_rate,
            paid_installments=terms.paid_installments,
            anticipated_installments=terms.anticipated_installments,
            created_at=datetime.now(),
        )

        self.financings.append(financing)
        logger.info(
            "Added financing %s (%s, %s x %d)",
            financing.financing_id,
            system.value,
            financing.principal,
            financing.term_months,
            extra={"financing_id": financing.financing_id},
        )
        self._persist("creation", financing.financing_id)
        return financing

    def update_financing(self, financing_id: str, updates: Mapping[str, Any]) -> bool:
        """Apply updates to a financing.

        Changing principal, annual_rate, term_months, system or start_date
        regenerates the whole schedule, discarding payment history.

        Returns
        -------
        bool
            False if the financing does not exist.
        """
        index = self._index(financing_id)
        if index is None:
            logger.debug("Update skipped, financing %s not found", financing_id)
            return False

        changes = parse_updates(updates)
        if "system" in changes:
            changes["system"] = parse_system(changes["system"])

        financing = self.financings[index]
        regenerate = any(
            key in SCHEDULE_FIELDS and value != getattr(financing, key) for key, value in changes.items()
        )
        updated = replace(financing, **changes)

        if regenerate:
            schedule = generate_schedule(
                updated.system,
                updated.principal,
                updated.annual_rate,
                updated.term_months,
                updated.start_date,
            )
            updated = replace(updated, installments=refresh_statuses(schedule, self._today()))
            logger.warning(
                "Regenerated schedule for %s; payment history discarded",
                financing_id,
                extra={"financing_id": financing_id},
            )

        self.financings[index] = updated
        logger.info("Updated financing %s: %s", financing_id, sorted(changes), extra={"financing_id": financing_id})
        self._persist("update", financing_id)
        return True

    def delete_financing(self, financing_id: str) -> bool:
        index = self._index(financing_id)
        if index is None:
            logger.debug("Delete skipped, financing %s not found", financing_id)
            return False

        del self.financings[index]
        logger.info("Deleted financing %s", financing_id, extra={"financing_id": financing_id})
        self._persist("deletion", financing_id)
        return True

    def mark_installment_paid(
        self,
        financing_id: str,
        number: int,
        paid_date: date | None = None,
        transaction_id: str | None = None,
    ) -> bool:
        """Mark one installment as paid (``paid_date`` defaults to today).

        Returns False if the financing or the installment does not exist.
        """
        financing = self.get_financing(financing_id)
        if financing is None:
            return False

        installment = financing.get_installment(number)
        if installment is None:
            logger.debug(
                "Installment %d not found in %s",
                number,
                financing_id,
                extra={"financing_id": financing_id, "installment_number": number},
            )
            return False

        installment.status = InstallmentStatus.PAID
        installment.paid_date = paid_date or self._today()
        installment.linked_transaction_id = transaction_id

        logger.info(
            "Installment %d of %s paid on %s",
            number,
            financing_id,
            installment.paid_date.isoformat(),
            extra={"financing_id": financing_id, "installment_number": number},
        )
        self._persist("payment", financing_id)
        return True

    def link_transaction(self, financing_id: str, number: int, transaction_id: str) -> bool:
        """Mark an installment paid today and link it to a ledger transaction."""
        return self.mark_installment_paid(financing_id, number, None, transaction_id)

    def settle_installment(
        self,
        financing_id: str,
        number: int,
        transactions: TransactionService | None = None,
        paid_date: date | None = None,
    ) -> bool:
        """Pay an installment, optionally recording the expense in the ledger.

        When ``transactions`` is given an expense for the installment payment
        is created first and its id is linked to the installment.
        """
        financing = self.get_financing(financing_id)
        installment = financing.get_installment(number) if financing else None
        if financing is None or installment is None:
            return False

        transaction_id = None
        if transactions is not None:
            transaction_id = transactions.create_expense(
                ExpenseRequest(
                    amount=installment.payment,
                    description=installment_description(number, financing.term_months, financing.name),
                    date=self._today(),
                )
            )
        return self.mark_installment_paid(financing_id, number, paid_date, transaction_id)

    def simulate_extra_amortization(
        self,
        financing_id: str,
        amount: Decimal | int | float | str,
        strategy: Strategy | str,
    ) -> SimulationResult | None:
        """Simulate without committing. None if unknown or nothing to simulate."""
        financing = self.get_financing(financing_id)
        if financing is None:
            return None
        return simulate_extra_amortization(financing, amount, strategy, self._today())

    def compare_scenarios(
        self,
        financing_id: str,
        amount: Decimal | int | float | str,
    ) -> ScenarioComparison | None:
        financing = self.get_financing(financing_id)
        if financing is None:
            return None
        return compare_scenarios(financing, amount, self._today())

    def apply_extra_amortization(
        self,
        financing_id: str,
        amount: Decimal | int | float | str,
        strategy: Strategy | str,
        transactions: TransactionService | None = None,
    ) -> ExtraAmortizationResult | None:
        """Commit an extra amortization.

        Paid installments are kept as history; the unpaid tail is replaced by
        the simulated schedule, renumbered to continue after the last paid
        installment.

        Returns
        -------
        ExtraAmortizationResult | None
            New total term and savings; None if the financing does not exist.

        Raises
        ------
        NoPendingInstallmentsError
            If every installment is already paid.
        """
        index = self._index(financing_id)
        if index is None:
            return None

        financing = self.financings[index]
        simulation = simulate_extra_amortization(financing, amount, strategy, self._today())
        if simulation is None:
            raise NoPendingInstallmentsError("no pending installments to restructure")

        paid = financing.paid
        last_number = paid[-1].number if paid else 0
        tail = renumber_after(simulation.new_installments, last_number)
        installments = paid + tail

        transaction_id = None
        if transactions is not None:
            transaction_id = transactions.create_expense(
                ExpenseRequest(
                    amount=to_decimal(amount),
                    description=extra_amortization_description(financing.name),
                    date=self._today(),
                )
            )

        self.financings[index] = replace(financing, installments=installments, term_months=len(installments))
        logger.info(
            "Applied extra amortization of %s to %s: term %d -> %d",
            amount,
            financing_id,
            financing.term_months,
            len(installments),
            extra={"financing_id": financing_id, "strategy": simulation.strategy.value},
        )
        self._persist("extra amortization", financing_id)

        return ExtraAmortizationResult(
            new_term=len(installments),
            savings=simulation.savings,
            transaction_id=transaction_id,
        )
