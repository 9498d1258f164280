"""Installment schedules, status tracking and extra amortization for loans."""

from financing_core.clock import Clock, FixedClock, SystemClock
from financing_core.exceptions import (
    ConfigurationError,
    DomainError,
    FinancingError,
    FinancingValidationError,
    NoPendingInstallmentsError,
    PersistenceError,
    UnsupportedAmortizationSystemError,
)
from financing_core.models import (
    AmortizationSystem,
    Financing,
    Installment,
    InstallmentStatus,
    LoanType,
    Strategy,
)
from financing_core.store import FinancingLedger

__version__ = "0.1.0"

__all__ = [
    "AmortizationSystem",
    "Clock",
    "ConfigurationError",
    "DomainError",
    "Financing",
    "FinancingError",
    "FinancingLedger",
    "FinancingValidationError",
    "FixedClock",
    "Installment",
    "InstallmentStatus",
    "LoanType",
    "NoPendingInstallmentsError",
    "PersistenceError",
    "Strategy",
    "SystemClock",
    "UnsupportedAmortizationSystemError",
]
