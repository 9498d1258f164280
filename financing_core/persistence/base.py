"""Persistent store protocol."""

from typing import Protocol

from financing_core.models.financing import Financing


class FinancingStore(Protocol):
    """Loads and saves the full financing collection under one namespace.

    Implementations raise ``PersistenceError`` on any failure.
    """

    namespace: str

    def load(self) -> list[Financing]: ...

    def save(self, financings: list[Financing]) -> None: ...
