"""Enumeration types for financing entities."""

from enum import Enum


class LoanType(str, Enum):
    HOUSE = "house"
    VEHICLE = "vehicle"
    OTHER = "other"


class AmortizationSystem(str, Enum):
    SAC = "SAC"
    PRICE = "PRICE"


class InstallmentStatus(str, Enum):
    PENDING = "pending"
    OVERDUE = "overdue"
    PAID = "paid"


class Strategy(str, Enum):
    """Extra amortization strategy."""

    REDUCE_TERM = "reduce_term"
    REDUCE_PAYMENT = "reduce_payment"
