"""Financing and installment models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from financing_core.models.enums import AmortizationSystem, InstallmentStatus, LoanType


@dataclass
class Installment:
    """Scheduled installment (parcela)."""

    number: int  # 1, 2, 3, ...
    due_date: date
    principal_component: Decimal
    interest_component: Decimal
    payment: Decimal
    balance: Decimal  # Outstanding principal after this installment
    status: InstallmentStatus = InstallmentStatus.PENDING
    paid_date: date | None = None
    linked_transaction_id: str | None = None

    @property
    def is_paid(self) -> bool:
        return self.status == InstallmentStatus.PAID


@dataclass
class Financing:
    """Loan contract with its installment schedule."""

    financing_id: str
    name: str
    loan_type: LoanType
    principal: Decimal
    annual_rate: Decimal  # Percent per year (e.g., 12 for 12%)
    term_months: int
    system: AmortizationSystem
    start_date: date
    installments: list[Installment] = field(default_factory=list)
    cet_rate: Decimal | None = None
    paid_installments: int = 0
    anticipated_installments: int = 0
    created_at: datetime | None = None

    @property
    def monthly_rate(self) -> Decimal:
        """Monthly rate as a fraction (12% a year -> 0.01)."""
        return self.annual_rate / 100 / 12

    @property
    def paid(self) -> list[Installment]:
        return [i for i in self.installments if i.is_paid]

    @property
    def unpaid(self) -> list[Installment]:
        return [i for i in self.installments if not i.is_paid]

    def get_installment(self, number: int) -> Installment | None:
        """Find an installment by its number."""
        for installment in self.installments:
            if installment.number == number:
                return installment
        return None
