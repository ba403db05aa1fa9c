# src/empservice/config.py
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)
from sqlalchemy.engine import URL, make_url

DEFAULT_CONFIG_PATH = "employee.toml"
DEFAULT_PORT = "9090"


class ConfigError(Exception):
    """Raised when the startup configuration cannot be loaded."""


class OwnerInfo(BaseModel):
    name: str = ""
    org: str = ""
    bio: str = ""
    dob: Optional[datetime] = None


class DatabaseInfo(BaseModel):
    server: str = "127.0.0.1"
    ports: List[int] = Field(default_factory=lambda: [5432])
    connection_max: int = 10
    enabled: bool = True

    driver: str = "postgresql+asyncpg"
    user: str = ""
    password: str = ""
    name: str = "employees"
    url: Optional[str] = None          # full SQLAlchemy URL wins over the pieces above
    echo: bool = False
    timeout: int = 30                  # seconds

    def sqlalchemy_url(self) -> URL:
        if self.url:
            return make_url(self.url)
        return URL.create(
            self.driver,
            username=self.user or None,
            password=self.password or None,
            host=self.server or None,
            port=self.ports[0] if self.ports else None,
            database=self.name or None,
        )


class ServerInfo(BaseModel):
    port: str = ""


class ClientsInfo(BaseModel):
    data: List[List[Any]] = Field(default_factory=list)
    hosts: List[str] = Field(default_factory=list)


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="EMPSVC_",
        env_nested_delimiter="__",
        env_file=".env",            # optional; process env wins
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    title: str = ""
    owner: OwnerInfo = Field(default_factory=OwnerInfo)
    database: DatabaseInfo = Field(default_factory=DatabaseInfo)
    server: ServerInfo = Field(default_factory=ServerInfo)
    clients: ClientsInfo = Field(default_factory=ClientsInfo)
    port: str = ""

    host: str = "0.0.0.0"
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

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
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def listen_port(self) -> str:
        """Top-level port, then [server] port, then the built-in default."""
        return self.port or self.server.port or DEFAULT_PORT


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
    """
    Read the TOML file at ``path`` into a Config.

    Environment variables (EMPSVC_*) and a local .env still override values
    from the file.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"config file not found: {path}")

    class FileConfig(Config):
        model_config = SettingsConfigDict(toml_file=path)

    try:
        return FileConfig()
    except ValueError as exc:  # TOMLDecodeError and ValidationError are both ValueErrors
        raise ConfigError(f"invalid config file {path}: {exc}") from exc
