"""Rollups over schedules and financing collections."""

from decimal import Decimal
from typing import Iterable

from financing_core.engine.schedule import round_money, to_decimal
from financing_core.models.enums import InstallmentStatus
from financing_core.models.financing import Financing, Installment
from financing_core.models.results import FinancingSummary, UpcomingInstallment

ZERO = Decimal("0")


def _total(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def remaining_balance(installments: list[Installment]) -> Decimal:
    """Principal still owed before the first pending installment.

    Overdue installments are skipped; a schedule with nothing pending reports
    0.00.
    """
    for installment in installments:
        if installment.status == InstallmentStatus.PENDING:
            return round_money(installment.balance + installment.principal_component)
    return round_money(ZERO)


def summarize(installments: list[Installment], principal: Decimal | int | float | str) -> FinancingSummary:
    """Compute totals, counts and progress for one schedule.

    Parameters
    ----------
    installments : list[Installment]
        Full schedule, paid history included.
    principal : Decimal
        Original borrowed amount.

    Returns
    -------
    FinancingSummary
        Aggregated figures; ``progress_percent`` is paid / total * 100.
    """
    paid = [i for i in installments if i.status == InstallmentStatus.PAID]
    pending = [i for i in installments if i.status == InstallmentStatus.PENDING]
    overdue = [i for i in installments if i.status == InstallmentStatus.OVERDUE]

    if installments:
        progress = Decimal(len(paid)) / Decimal(len(installments)) * 100
    else:
        progress = ZERO

    return FinancingSummary(
        principal=round_money(to_decimal(principal)),
        total_payment=round_money(_total(i.payment for i in installments)),
        total_interest=round_money(_total(i.interest_component for i in installments)),
        paid_count=len(paid),
        pending_count=len(pending),
        overdue_count=len(overdue),
        paid_amount=round_money(_total(i.payment for i in paid)),
        pending_amount=round_money(_total(i.payment for i in pending)),
        overdue_amount=round_money(_total(i.payment for i in overdue)),
        remaining_balance=remaining_balance(installments),
        progress_percent=round_money(progress),
    )


def next_installments(installments: list[Installment], count: int = 3) -> list[Installment]:
    """First ``count`` unpaid installments of one schedule, in schedule order."""
    return [i for i in installments if not i.is_paid][:count]


def upcoming_installments(financings: Iterable[Financing], count: int = 5) -> list[UpcomingInstallment]:
    """Merge unpaid installments across financings, earliest due first.

    Ties keep insertion order (financing order, then schedule order).
    """
    upcoming = [
        UpcomingInstallment(
            financing_id=financing.financing_id,
            financing_name=financing.name,
            installment=installment,
        )
        for financing in financings
        for installment in financing.installments
        if not installment.is_paid
    ]
    upcoming.sort(key=lambda item: item.due_date)
    return upcoming[:count]


def overdue_count(financings: Iterable[Financing]) -> int:
    """Count overdue installments across all financings."""
    return sum(
        1
        for financing in financings
        for installment in financing.installments
        if installment.status == InstallmentStatus.OVERDUE
    )


def total_remaining_balance(financings: Iterable[Financing]) -> Decimal:
    """Sum of remaining balances across all financings."""
    return round_money(_total(remaining_balance(f.installments) for f in financings))
