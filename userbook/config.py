"""Application Configuration: layered settings via pydantic-settings.

Invariants:
    - Keys are grouped (server.*, database.*, templates.*, log.*); the env var for
      a key is the key with "." replaced by "_" (DATABASE_DSN, SERVER_PORT)
    - Priority: constructor args > env vars > .env file > config.yaml > defaults
    - database.dsn is required; Settings() raises when it is empty
    - get_settings() is cached (lru_cache): single instance per process
"""

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


class ServerSettings(BaseModel):
    host: str = "localhost"
    port: int = 8080
    # seconds to wait for in-flight requests on shutdown
    shutdown_timeout: int = 5


class DatabaseSettings(BaseModel):
    dsn: str = ""
    max_open_conns: int = 25
    max_idle_conns: int = 5
    # seconds
    conn_max_lifetime: int = 300
    statement_timeout: float = 5.0

    @field_validator("dsn", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Plain postgresql:// URLs need the asyncpg driver suffix."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v


class TemplatesSettings(BaseModel):
    path: str = str(TEMPLATES_DIR)


class LogSettings(BaseModel):
    level: str = "INFO"
    format: str = "json"


class Settings(BaseSettings):
    """Application settings from constructor, environment, .env and config.yaml."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="_",
        env_nested_max_split=1,
        case_sensitive=False,
        yaml_file="config.yaml",
        extra="ignore",
    )

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    templates: TemplatesSettings = TemplatesSettings()
    log: LogSettings = LogSettings()

    @model_validator(mode="after")
    def require_dsn(self) -> "Settings":
        if not self.database.dsn:
            raise ValueError(
                "database.dsn is empty (set in config.yaml or env DATABASE_DSN)",
            )
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
