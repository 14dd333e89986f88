"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    DatabaseSchema     → database.yaml
    LoggingSchema      → logging.yaml
    NotesSchema        → notes.yaml
"""

from pydantic import BaseModel, ConfigDict, Field

from notekeeper.backend.schemas.note import OrderDirection, OrderKey


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool


# =============================================================================
# database.yaml
# =============================================================================


class DatabaseSchema(_StrictBase):
    url: str
    echo: bool


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# notes.yaml
# =============================================================================


class DefaultOrderSchema(_StrictBase):
    key: OrderKey
    direction: OrderDirection


class NotesSchema(_StrictBase):
    default_order: DefaultOrderSchema
    undo_window_seconds: float | None = Field(default=None, gt=0)
