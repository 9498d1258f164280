"""Configuration management for financing-core."""

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_NAMESPACE = "finance_dashboard_financings"


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "financing"
    user: str = "postgres"
    password: str = "postgres"
    table: str = "financing_store"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class StorageConfig:
    """Persistent store selection.

    ``backend`` is one of ``memory``, ``json`` or ``postgres``.
    """

    backend: str = "memory"
    namespace: str = DEFAULT_NAMESPACE
    json_path: Path = field(default_factory=lambda: Path("data") / "financings.json")


@dataclass
class LedgerConfig:
    """Defaults for ledger read paths."""

    upcoming_count: int = 5
    next_count: int = 3


@dataclass
class FinancingConfig:
    """Main configuration for financing-core."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "FinancingConfig":
        """Create config from environment variables."""
        import os

        storage = StorageConfig(
            backend=os.getenv("FINANCING_STORE_BACKEND", "memory").lower(),
            namespace=os.getenv("FINANCING_STORE_NAMESPACE", DEFAULT_NAMESPACE),
            json_path=Path(os.getenv("FINANCING_JSON_PATH", str(Path("data") / "financings.json"))),
        )

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "financing"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            table=os.getenv("POSTGRES_TABLE", "financing_store"),
        )

        ledger = LedgerConfig(
            upcoming_count=int(os.getenv("UPCOMING_COUNT", "5")),
            next_count=int(os.getenv("NEXT_COUNT", "3")),
        )

        return cls(
            storage=storage,
            postgres=postgres,
            ledger=ledger,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
