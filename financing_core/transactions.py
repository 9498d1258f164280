"""Boundary to the surrounding expense ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Protocol

from faker import Faker

logger = logging.getLogger(__name__)

FINANCING_CATEGORY = "Financiamento"


@dataclass(frozen=True)
class ExpenseRequest:
    """Expense entry requested from the transaction service."""

    amount: Decimal
    description: str
    date: date
    category: str = FINANCING_CATEGORY


class TransactionService(Protocol):
    """Creates expense entries and returns their opaque identifier."""

    def create_expense(self, request: ExpenseRequest) -> str: ...


@dataclass
class InMemoryTransactionService:
    """Transaction service that keeps expenses in a dict.

    Useful for scripts and tests where no real ledger is available.
    """

    expenses: dict[str, ExpenseRequest] = field(default_factory=dict)
    seed: int | None = None

    def __post_init__(self) -> None:
        self._fake = Faker()
        if self.seed is not None:
            self._fake.seed_instance(self.seed)

    def create_expense(self, request: ExpenseRequest) -> str:
        transaction_id = self._fake.uuid4()
        self.expenses[transaction_id] = request
        logger.debug("Recorded expense %s: %s %s", transaction_id, request.amount, request.description)
        return transaction_id


def installment_description(number: int, term_months: int, financing_name: str) -> str:
    return f"Pagamento Parcela {number}/{term_months} - {financing_name}"


def extra_amortization_description(financing_name: str) -> str:
    return f"Amortização Extra - {financing_name}"
