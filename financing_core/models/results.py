"""Read-side result models produced by the engine."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from financing_core.models.enums import Strategy
from financing_core.models.financing import Installment


@dataclass(frozen=True)
class FinancingSummary:
    """Rollup of one financing's schedule."""

    principal: Decimal
    total_payment: Decimal
    total_interest: Decimal
    paid_count: int
    pending_count: int
    overdue_count: int
    paid_amount: Decimal
    pending_amount: Decimal
    overdue_amount: Decimal
    remaining_balance: Decimal
    progress_percent: Decimal


@dataclass(frozen=True)
class UpcomingInstallment:
    """Non-paid installment tagged with its financing."""

    financing_id: str
    financing_name: str
    installment: Installment

    @property
    def due_date(self) -> date:
        return self.installment.due_date


@dataclass(frozen=True)
class Savings:
    interest: Decimal
    months: int


@dataclass(frozen=True)
class SimulationResult:
    """Projected tail of a schedule after an extra amortization."""

    new_installments: list[Installment]
    savings: Savings
    new_term: int
    strategy: Strategy | None = None

    @property
    def total_payment(self) -> Decimal:
        return sum((i.payment for i in self.new_installments), Decimal("0"))

    @property
    def total_interest(self) -> Decimal:
        return sum((i.interest_component for i in self.new_installments), Decimal("0"))

    @property
    def last_due_date(self) -> date | None:
        return self.new_installments[-1].due_date if self.new_installments else None

    @property
    def is_payoff(self) -> bool:
        return not self.new_installments


@dataclass(frozen=True)
class ScenarioProjection:
    """Untouched projection of the remaining installments."""

    term: int
    total_payment: Decimal
    total_interest: Decimal
    last_due_date: date | None


@dataclass(frozen=True)
class ScenarioComparison:
    """Side-by-side view of both strategies against the current schedule."""

    extra_amount: Decimal
    current: ScenarioProjection
    reduce_term: SimulationResult
    reduce_payment: SimulationResult


@dataclass(frozen=True)
class ExtraAmortizationResult:
    """Outcome of a committed extra amortization."""

    new_term: int
    savings: Savings
    transaction_id: str | None = None
