"""Configuration management for registry-sync."""

from dataclasses import dataclass, field
from pathlib import Path

from registry_sync.exceptions import ConfigurationError


@dataclass
class LocalStoreConfig:
    """Durable local store configuration."""

    data_dir: Path = field(default_factory=lambda: Path(".registry"))
    pretty_json: bool = False


@dataclass
class PostgresConfig:
    """PostgreSQL remote mirror configuration."""

    enabled: bool = False
    host: str = "localhost"
    port: int = 5432
    database: str = "registry"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class ImportConfig:
    """Import file handling configuration."""

    delimiter: str = ","
    member_email_domain: str = "members.registry.local"
    default_mode: str = "destructive"

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1:
            raise ConfigurationError(f"Delimiter must be a single character, got {self.delimiter!r}")
        if self.default_mode not in ("destructive", "additive"):
            raise ConfigurationError(f"Unknown import mode: {self.default_mode}")


@dataclass
class SeedConfig:
    """Configuration for the built-in demo registry."""

    seed: int = 42
    num_members: int = 5
    accounts_per_member: tuple[int, int] = (1, 2)
    transactions_per_account: int = 6
    locale: str = "en_US"


@dataclass
class RegistryConfig:
    """Main configuration for registry-sync."""

    local: LocalStoreConfig = field(default_factory=LocalStoreConfig)
    remote: PostgresConfig = field(default_factory=PostgresConfig)
    imports: ImportConfig = field(default_factory=ImportConfig)
    seed: SeedConfig = field(default_factory=SeedConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "RegistryConfig":
        """Create config from environment variables."""
        import os

        local = LocalStoreConfig(
            data_dir=Path(os.getenv("REGISTRY_DATA_DIR", ".registry")),
            pretty_json=os.getenv("REGISTRY_PRETTY_JSON", "false").lower() == "true",
        )

        remote = PostgresConfig(
            enabled=os.getenv("REGISTRY_REMOTE_MIRROR", "false").lower() == "true",
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "registry"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        )

        imports = ImportConfig(
            delimiter=os.getenv("REGISTRY_DELIMITER", ","),
            member_email_domain=os.getenv("REGISTRY_EMAIL_DOMAIN", "members.registry.local"),
            default_mode=os.getenv("REGISTRY_IMPORT_MODE", "destructive").lower(),
        )

        seed = SeedConfig(
            seed=int(os.getenv("SEED")) if os.getenv("SEED") else 42,
            num_members=int(os.getenv("REGISTRY_SEED_MEMBERS", "5")),
            locale=os.getenv("REGISTRY_SEED_LOCALE", "en_US"),
        )

        return cls(
            local=local,
            remote=remote,
            imports=imports,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
