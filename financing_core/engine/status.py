"""Installment status refresh against the current date."""

from dataclasses import replace
from datetime import date

from financing_core.models.enums import InstallmentStatus
from financing_core.models.financing import Financing, Installment


def status_for(installment: Installment, today: date) -> InstallmentStatus:
    """Status an installment should have on ``today``.

    Paid is terminal. Otherwise an installment is overdue once its due date
    is strictly before today.
    """
    if installment.status == InstallmentStatus.PAID:
        return InstallmentStatus.PAID
    if installment.due_date < today:
        return InstallmentStatus.OVERDUE
    return InstallmentStatus.PENDING


def refresh_statuses(installments: list[Installment], today: date) -> list[Installment]:
    """Return the schedule with pending/overdue recomputed for ``today``.

    Inputs are never mutated; unchanged installments are returned as-is.
    """
    refreshed: list[Installment] = []
    for installment in installments:
        status = status_for(installment, today)
        if status == installment.status:
            refreshed.append(installment)
        else:
            refreshed.append(replace(installment, status=status))
    return refreshed


def refresh_financing(financing: Financing, today: date) -> Financing:
    """Return a copy of ``financing`` with refreshed installment statuses."""
    return replace(financing, installments=refresh_statuses(financing.installments, today))
