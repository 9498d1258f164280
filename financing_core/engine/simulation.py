"""Extra amortization ("what-if") simulation.

Nothing here mutates its inputs. A simulation is committed only through
``FinancingLedger.apply_extra_amortization``.
"""

import math
from datetime import date
from decimal import Decimal

from financing_core.engine.schedule import (
    ZERO,
    calculate_price,
    calculate_sac,
    generate_schedule,
    monthly_rate,
    parse_system,
    round_money,
    to_decimal,
)
from financing_core.exceptions import FinancingValidationError
from financing_core.models.enums import AmortizationSystem, Strategy
from financing_core.models.financing import Financing, Installment
from financing_core.models.results import (
    Savings,
    ScenarioComparison,
    ScenarioProjection,
    SimulationResult,
)


def parse_strategy(strategy: Strategy | str) -> Strategy:
    """Resolve a strategy name, rejecting unknown values."""
    try:
        return Strategy(strategy)
    except ValueError:
        raise FinancingValidationError(f"unknown amortization strategy: {strategy!r}") from None


def _interest(installments: list[Installment]) -> Decimal:
    return sum((i.interest_component for i in installments), ZERO)


def current_balance(financing: Financing) -> Decimal:
    """Outstanding principal after the last paid installment."""
    paid = financing.paid
    if paid:
        return paid[-1].balance
    return to_decimal(financing.principal)


def _reduce_payment(financing: Financing, balance: Decimal, term: int, today: date) -> list[Installment]:
    return generate_schedule(financing.system, balance, financing.annual_rate, term, today)


def _reduce_term(
    financing: Financing,
    pending: list[Installment],
    balance: Decimal,
    today: date,
) -> list[Installment]:
    rate = monthly_rate(financing.annual_rate)
    system = parse_system(financing.system)

    if system == AmortizationSystem.PRICE:
        pmt = pending[0].payment
        if balance * rate >= pmt:
            # Interest alone eats the payment; the debt cannot amortize at this PMT.
            return _reduce_payment(financing, balance, len(pending), today)
        if rate == 0:
            periods = balance / pmt
        else:
            periods = -(1 - balance * rate / pmt).ln() / (1 + rate).ln()
        new_term = min(max(1, math.ceil(periods)), len(pending))
        return calculate_price(balance, financing.annual_rate, new_term, today)

    amortization = pending[0].principal_component
    if amortization <= 0:
        return _reduce_payment(financing, balance, len(pending), today)
    new_term = min(max(1, math.ceil(balance / amortization)), len(pending))
    return calculate_sac(balance, financing.annual_rate, new_term, today)


def simulate_extra_amortization(
    financing: Financing,
    extra_amount: Decimal | int | float | str,
    strategy: Strategy | str,
    today: date,
) -> SimulationResult | None:
    """Project the unpaid tail of a schedule after an extra payment.

    Parameters
    ----------
    financing : Financing
        Financing to project; left untouched.
    extra_amount : Decimal
        Extra principal payment, must be positive.
    strategy : Strategy
        ``reduce_term`` keeps the payment and shortens the schedule;
        ``reduce_payment`` keeps the term and lowers the payment.
    today : date
        Anchor date of the new schedule.

    Returns
    -------
    SimulationResult | None
        None when every installment is already paid.
    """
    extra = to_decimal(extra_amount)
    if extra <= 0:
        raise FinancingValidationError(f"extra amount must be positive, got {extra}")
    strategy = parse_strategy(strategy)

    pending = financing.unpaid
    if not pending:
        return None

    new_balance = max(ZERO, current_balance(financing) - extra)
    old_interest = _interest(pending)

    if new_balance == 0:
        return SimulationResult(
            new_installments=[],
            savings=Savings(interest=round_money(old_interest), months=len(pending)),
            new_term=0,
            strategy=strategy,
        )

    if strategy == Strategy.REDUCE_PAYMENT:
        new_installments = _reduce_payment(financing, new_balance, len(pending), today)
    else:
        new_installments = _reduce_term(financing, pending, new_balance, today)

    return SimulationResult(
        new_installments=new_installments,
        savings=Savings(
            interest=round_money(old_interest - _interest(new_installments)),
            months=len(pending) - len(new_installments),
        ),
        new_term=len(new_installments),
        strategy=strategy,
    )


def current_projection(financing: Financing) -> ScenarioProjection:
    """Projection of the remaining installments with no extra payment."""
    pending = financing.unpaid
    return ScenarioProjection(
        term=len(pending),
        total_payment=round_money(sum((i.payment for i in pending), ZERO)),
        total_interest=round_money(_interest(pending)),
        last_due_date=pending[-1].due_date if pending else None,
    )


def compare_scenarios(
    financing: Financing,
    extra_amount: Decimal | int | float | str,
    today: date,
) -> ScenarioComparison | None:
    """Simulate both strategies side by side with the current projection.

    Returns None when there is nothing to simulate.
    """
    by_term = simulate_extra_amortization(financing, extra_amount, Strategy.REDUCE_TERM, today)
    by_payment = simulate_extra_amortization(financing, extra_amount, Strategy.REDUCE_PAYMENT, today)
    if by_term is None or by_payment is None:
        return None

    return ScenarioComparison(
        extra_amount=to_decimal(extra_amount),
        current=current_projection(financing),
        reduce_term=by_term,
        reduce_payment=by_payment,
    )
