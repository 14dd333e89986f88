"""
Configuration Management.

Loads overrides from config/.env (and the environment) and settings from
config/settings/*.yaml.

Overrides (.env / environment, prefix NOTEKEEPER_):
    NOTEKEEPER_DATABASE_URL

Settings (YAML):
    application.yaml   - App identity
    database.yaml      - Database connection settings
    logging.yaml       - Logging configuration
    notes.yaml         - Default note order, undo window
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from notekeeper.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    LoggingSchema,
    NotesSchema,
)
from notekeeper.backend.schemas.note import NoteOrder


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Environment overrides loaded from config/.env and NOTEKEEPER_* variables."""

    database_url: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="NOTEKEEPER_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._notes = _load_validated(NotesSchema, "notes.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        """Database settings."""
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def notes(self) -> NotesSchema:
        """Note list behaviour (default order, undo window)."""
        return self._notes


@lru_cache
def get_settings() -> Settings:
    """Get cached overrides instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    if env_path.is_file():
        return Settings(_env_file=str(env_path))
    return Settings()


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_database_url() -> str:
    """
    Resolve the database URL.

    NOTEKEEPER_DATABASE_URL wins over database.yaml.

    Returns:
        SQLAlchemy async connection URL string.
    """
    override = get_settings().database_url
    if override:
        return override
    return get_app_config().database.url


def get_default_order() -> NoteOrder:
    """Build the configured initial note order."""
    order = get_app_config().notes.default_order
    return NoteOrder(key=order.key, direction=order.direction)
