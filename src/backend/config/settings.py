"""Centralized application settings loaded from environment variables.

All configuration is defined once here. Other modules should import
``get_settings()`` rather than calling ``os.getenv()`` directly.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SCHEMA_FILE = Path(__file__).parent / "workflow-schema.sql"


class Settings(BaseSettings):
    """Application-wide configuration backed by environment variables.

    Field names are **lowercased** versions of the env-var names.
    ``pydantic-settings`` maps them automatically (case-insensitive).

    Example::

        settings = Settings()  # reads .env + real env
        schema_file = settings.workflow_schema_file
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -- Schema context ----------------------------------------------------

    use_schema_file: bool = True
    """Read the schema description from ``workflow_schema_file``."""

    workflow_schema_file: Path = DEFAULT_SCHEMA_FILE
    """Schema description embedded (as a summary) in generated comments."""

    # -- Analysis ----------------------------------------------------------

    analysis_cache_ttl_seconds: int = 3600
    """TTL (seconds) for cached analysis results. 0 disables caching."""

    analysis_max_cache_entries: int = 100
    """Upper bound on cached analysis results."""

    # -- Output validation -------------------------------------------------

    min_expected_inserts: int = 3
    """Fewest INSERTs a complete script has (template + activity + transition)."""

    # -- Operational -------------------------------------------------------

    log_level: str = "INFO"
    """Root log level for the command-line entry point."""


def get_settings() -> Settings:
    """Return a cached ``Settings`` instance.

    Uses a module-level singleton so the ``.env`` file is read at
    most once per process.

    Returns:
        The global ``Settings`` object.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


_settings: Settings | None = None
