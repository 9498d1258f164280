"""Installment schedule computation for PRICE and SAC amortization.

Pure functions: Decimal in, Installment list out. No I/O.

The running balance is carried at full precision; every figure placed on an
installment is rounded to cents, half away from zero.
"""

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from financing_core.exceptions import FinancingValidationError, UnsupportedAmortizationSystemError
from financing_core.models.enums import AmortizationSystem, InstallmentStatus
from financing_core.models.financing import Installment

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


def round_money(value: Decimal) -> Decimal:
    """Round a monetary value to cents (ROUND_HALF_UP is half away from zero)."""
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Coerce a numeric input to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def monthly_rate(annual_rate: Decimal | int | float | str) -> Decimal:
    """Convert a nominal annual percentage into a monthly fraction."""
    return to_decimal(annual_rate) / 100 / 12


def add_months(start: date, months: int) -> date:
    """Advance a date by calendar months.

    When the target month is shorter than ``start.day`` the result is clamped
    to the target month's last day (Jan 31 + 1 month -> Feb 28/29).
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def price_payment(principal: Decimal, rate: Decimal, term_months: int) -> Decimal:
    """Fixed PRICE payment, unrounded.

    PMT = P * [r(1+r)^n] / [(1+r)^n - 1]
    """
    if rate == 0:
        return principal / term_months
    factor = (1 + rate) ** term_months
    return principal * (rate * factor) / (factor - 1)


def _check_terms(principal: Decimal, term_months: int) -> None:
    if term_months <= 0:
        raise FinancingValidationError(f"term_months must be positive, got {term_months}")
    if principal < 0:
        raise FinancingValidationError(f"principal must not be negative, got {principal}")


def calculate_price(
    principal: Decimal | int | float | str,
    annual_rate: Decimal | int | float | str,
    term_months: int,
    start_date: date,
) -> list[Installment]:
    """Generate a PRICE (French, fixed payment) schedule.

    Parameters
    ----------
    principal : Decimal
        Amount to amortize.
    annual_rate : Decimal
        Nominal annual rate in percent (12 means 12% a year).
    term_months : int
        Number of installments.
    start_date : date
        Contract start; installment ``i`` is due ``i`` months later.

    Returns
    -------
    list[Installment]
        Pending installments numbered 1..term_months.
    """
    principal = to_decimal(principal)
    _check_terms(principal, term_months)
    rate = monthly_rate(annual_rate)
    pmt = price_payment(principal, rate, term_months)

    installments: list[Installment] = []
    balance = principal
    for number in range(1, term_months + 1):
        interest = balance * rate
        amortization = pmt - interest
        balance = max(ZERO, balance - amortization)

        installments.append(
            Installment(
                number=number,
                due_date=add_months(start_date, number),
                principal_component=round_money(amortization),
                interest_component=round_money(interest),
                payment=round_money(pmt),
                balance=round_money(balance),
                status=InstallmentStatus.PENDING,
            )
        )
    return installments


def calculate_sac(
    principal: Decimal | int | float | str,
    annual_rate: Decimal | int | float | str,
    term_months: int,
    start_date: date,
) -> list[Installment]:
    """Generate a SAC (constant amortization) schedule.

    Principal is repaid in equal parts; interest and payment decrease with the
    balance. Parameters are the same as :func:`calculate_price`.
    """
    principal = to_decimal(principal)
    _check_terms(principal, term_months)
    rate = monthly_rate(annual_rate)
    amortization = principal / term_months

    installments: list[Installment] = []
    balance = principal
    for number in range(1, term_months + 1):
        interest = balance * rate
        payment = amortization + interest
        balance = max(ZERO, balance - amortization)

        installments.append(
            Installment(
                number=number,
                due_date=add_months(start_date, number),
                principal_component=round_money(amortization),
                interest_component=round_money(interest),
                payment=round_money(payment),
                balance=round_money(balance),
                status=InstallmentStatus.PENDING,
            )
        )
    return installments


CALCULATORS: dict[AmortizationSystem, Callable[..., list[Installment]]] = {
    AmortizationSystem.PRICE: calculate_price,
    AmortizationSystem.SAC: calculate_sac,
}


def parse_system(system: AmortizationSystem | str) -> AmortizationSystem:
    """Resolve an amortization system, rejecting unknown values."""
    try:
        return AmortizationSystem(system)
    except ValueError:
        raise UnsupportedAmortizationSystemError(
            f"unsupported amortization system: {system!r}"
        ) from None


def generate_schedule(
    system: AmortizationSystem | str,
    principal: Decimal | int | float | str,
    annual_rate: Decimal | int | float | str,
    term_months: int,
    start_date: date,
) -> list[Installment]:
    """Generate a schedule for the given amortization system."""
    calculator = CALCULATORS[parse_system(system)]
    return calculator(principal, annual_rate, term_months, start_date)
