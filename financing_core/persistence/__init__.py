"""Persistent store adapters for financing collections."""

from financing_core.persistence.base import FinancingStore
from financing_core.persistence.factory import create_store
from financing_core.persistence.json_file import JsonFileFinancingStore
from financing_core.persistence.memory import InMemoryFinancingStore

__all__ = [
    "FinancingStore",
    "InMemoryFinancingStore",
    "JsonFileFinancingStore",
    "create_store",
]
