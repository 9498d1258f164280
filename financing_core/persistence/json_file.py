"""JSON file financing store."""

import json
import logging
from pathlib import Path

from financing_core.config import DEFAULT_NAMESPACE
from financing_core.exceptions import PersistenceError
from financing_core.models.financing import Financing
from financing_core.persistence.serialization import dump_financings, load_financings

logger = logging.getLogger(__name__)


class JsonFileFinancingStore:
    """Store financings in a JSON document keyed by namespace."""

    def __init__(
        self,
        path: str | Path,
        namespace: str = DEFAULT_NAMESPACE,
        pretty: bool = False,
    ) -> None:
        """Initialize JSON file store.

        Parameters
        ----------
        path : str | Path
            JSON file holding ``{namespace: [financing, ...]}``.
        namespace : str
            Key under which this store reads and writes.
        pretty : bool
            Pretty-print JSON output.
        """
        self.path = Path(path)
        self.namespace = namespace
        self.pretty = pretty

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to read {self.path}: {e}") from e
        if not isinstance(document, dict):
            raise PersistenceError(f"Unexpected document in {self.path}: expected an object")
        return document

    def load(self) -> list[Financing]:
        """Load the financings stored under this namespace."""
        payload = self._read_document().get(self.namespace, [])
        financings = load_financings(payload)
        logger.debug("Loaded %d financings from %s", len(financings), self.path)
        return financings

    def save(self, financings: list[Financing]) -> None:
        """Replace the financings stored under this namespace."""
        document = self._read_document()
        document[self.namespace] = dump_financings(financings)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                if self.pretty:
                    json.dump(document, f, indent=2, ensure_ascii=False)
                else:
                    json.dump(document, f, ensure_ascii=False)
            tmp_path.replace(self.path)
        except OSError as e:
            raise PersistenceError(f"Failed to write {self.path}: {e}") from e

        logger.debug("Saved %d financings to %s", len(financings), self.path)
