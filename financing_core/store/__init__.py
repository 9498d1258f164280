"""Stateful financing ledger."""

from financing_core.store.ledger import FinancingLedger

__all__ = ["FinancingLedger"]
