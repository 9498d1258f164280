"""In-memory financing store."""

import copy
from dataclasses import dataclass, field
from typing import Any

from financing_core.config import DEFAULT_NAMESPACE
from financing_core.models.financing import Financing
from financing_core.persistence.serialization import dump_financings, load_financings


@dataclass
class InMemoryFinancingStore:
    """Key-value store kept in a dict, one serialized payload per namespace.

    Payloads are serialized on save so callers never share objects with the
    store.
    """

    namespace: str = DEFAULT_NAMESPACE
    data: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    save_count: int = 0

    def load(self) -> list[Financing]:
        return load_financings(copy.deepcopy(self.data.get(self.namespace, [])))

    def save(self, financings: list[Financing]) -> None:
        self.data[self.namespace] = dump_financings(financings)
        self.save_count += 1
