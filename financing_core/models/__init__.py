"""Domain models for financing schedules."""

from financing_core.models.enums import (
    AmortizationSystem,
    InstallmentStatus,
    LoanType,
    Strategy,
)
from financing_core.models.financing import Financing, Installment
from financing_core.models.results import (
    ExtraAmortizationResult,
    FinancingSummary,
    Savings,
    ScenarioComparison,
    ScenarioProjection,
    SimulationResult,
    UpcomingInstallment,
)

__all__ = [
    "AmortizationSystem",
    "ExtraAmortizationResult",
    "Financing",
    "FinancingSummary",
    "Installment",
    "InstallmentStatus",
    "LoanType",
    "Savings",
    "ScenarioComparison",
    "ScenarioProjection",
    "SimulationResult",
    "Strategy",
    "UpcomingInstallment",
]
