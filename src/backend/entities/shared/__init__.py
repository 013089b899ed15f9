"""Shared utilities for entities."""

from .escaping import escape_sql_string, sql_literal
from .protocols import CompletionClient, LoggingReporter, NoOpReporter, ProgressReporter
from .schema_context import load_schema_context
from .status_catalog import DEFAULT_EXISTING_STATUSES

__all__ = [
    "DEFAULT_EXISTING_STATUSES",
    "CompletionClient",
    "LoggingReporter",
    "NoOpReporter",
    "ProgressReporter",
    "escape_sql_string",
    "load_schema_context",
    "sql_literal",
]
