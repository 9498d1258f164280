"""Pure schedule, status, summary and simulation functions."""

from financing_core.engine.schedule import (
    add_months,
    calculate_price,
    calculate_sac,
    generate_schedule,
    round_money,
)
from financing_core.engine.simulation import compare_scenarios, simulate_extra_amortization
from financing_core.engine.status import refresh_financing, refresh_statuses
from financing_core.engine.summary import (
    next_installments,
    overdue_count,
    summarize,
    total_remaining_balance,
    upcoming_installments,
)

__all__ = [
    "add_months",
    "calculate_price",
    "calculate_sac",
    "compare_scenarios",
    "generate_schedule",
    "next_installments",
    "overdue_count",
    "refresh_financing",
    "refresh_statuses",
    "round_money",
    "simulate_extra_amortization",
    "summarize",
    "total_remaining_balance",
    "upcoming_installments",
]
