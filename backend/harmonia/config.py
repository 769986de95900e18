"""Application Configuration — immutable Environment snapshot via pydantic-settings.

Invariants:
    - Resolved ONCE at process start by load_environment(); read-only afterwards
      (frozen models: attribute assignment raises, mappings are read-only views)
    - Never a module-level singleton: the entry point builds it and passes it to
      the orchestrator, which injects it into every component
    - Zero configured databases is valid (the datastore stage is skipped)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env support
    - Nested sections from HARMONIA_<SECTION>__<FIELD>; databases as a JSON
      mapping in HARMONIA_DATABASES (name -> {url, pool_size, ...})
    - Profile read from HARMONIA_ENV (NODE_ENV-style single flag)
"""

from types import MappingProxyType
from typing import Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from harmonia.core.domain_types import Profile


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class AppSection(_Frozen):
    name: str = "Harmonia API"
    locale: str = "en"
    timezone: str = "UTC"


class CorsPolicy(_Frozen):
    allow_origins: tuple[str, ...] = ("http://localhost:5173",)
    allow_methods: tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
    allow_headers: tuple[str, ...] = ("*",)
    expose_headers: tuple[str, ...] = ()
    allow_credentials: bool = False


class SslMaterial(_Frozen):
    certfile: str | None = None
    keyfile: str | None = None
    ca_certs: str | None = None
    password: str | None = None
    hpkp_keys: tuple[str, ...] = ()
    hsts_max_age: int = 15_552_000  # 180 days


class ServerSection(_Frozen):
    host: str = "0.0.0.0"
    port: int = Field(8000, ge=0, le=65535)
    secure: bool = False
    cors: CorsPolicy = CorsPolicy()
    ssl: SslMaterial = SslMaterial()
    compression_min_size: int = 100
    # ADR: deadline for the whole connect stage, all databases together
    connect_timeout_seconds: float = 10.0


class DatabaseSpec(_Frozen):
    url: str
    pool_size: int = 20
    max_overflow: int = 10
    echo: bool = False

    @field_validator("url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted providers give postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v


class LogSection(_Frozen):
    level: str = "INFO"
    format: str = "json"
    fault_log_path: str | None = None


class Environment(BaseSettings):
    """Process-wide configuration snapshot."""

    model_config = SettingsConfigDict(
        env_prefix="HARMONIA_",
        env_nested_delimiter="__",
        env_file=".env",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    profile: Profile = Field(
        Profile.DEVELOPMENT,
        validation_alias=AliasChoices("HARMONIA_ENV", "HARMONIA_PROFILE", "profile"),
    )
    app: AppSection = AppSection()
    server: ServerSection = ServerSection()
    databases: Mapping[str, DatabaseSpec] = Field(default_factory=dict, validate_default=True)
    log: LogSection = LogSection()

    @field_validator("databases", mode="after")
    @classmethod
    def freeze_databases(cls, v: Mapping[str, DatabaseSpec]) -> Mapping[str, DatabaseSpec]:
        return MappingProxyType(dict(v))

    @property
    def is_development(self) -> bool:
        return self.profile is Profile.DEVELOPMENT

    @property
    def is_test(self) -> bool:
        return self.profile is Profile.TEST


def load_environment(**overrides) -> Environment:
    """Resolve the snapshot from env vars / .env, with explicit overrides on top."""
    return Environment(**overrides)
