"""Build the configured persistent store."""

from financing_core.config import FinancingConfig
from financing_core.exceptions import ConfigurationError
from financing_core.persistence.base import FinancingStore
from financing_core.persistence.json_file import JsonFileFinancingStore
from financing_core.persistence.memory import InMemoryFinancingStore


def create_store(config: FinancingConfig) -> FinancingStore:
    """Create the store named by ``config.storage.backend``."""
    storage = config.storage
    if storage.backend == "memory":
        return InMemoryFinancingStore(namespace=storage.namespace)
    if storage.backend == "json":
        return JsonFileFinancingStore(storage.json_path, namespace=storage.namespace)
    if storage.backend == "postgres":
        from financing_core.persistence.postgres import PostgresFinancingStore

        return PostgresFinancingStore(
            config.postgres.connection_string,
            namespace=storage.namespace,
            table=config.postgres.table,
        )
    raise ConfigurationError(f"Unknown storage backend: {storage.backend!r}")
