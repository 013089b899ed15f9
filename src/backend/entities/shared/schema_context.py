"""Schema context retrieval.

Reads the textual description of the four PAWS tables. The text is
only used for documentation inside generated comments; it is never
parsed. This is the one place that touches the filesystem, and it
runs before compilation.
"""

from __future__ import annotations

import logging

from config.settings import Settings

logger = logging.getLogger(__name__)

PLACEHOLDER_SCHEMA = (
    "-- PAWS workflow schema placeholder\n"
    "-- Please ensure your actual schema file is configured correctly"
)


def load_schema_context(settings: Settings) -> str:
    """Return the configured schema description, or a placeholder.

    Args:
        settings: Application settings (``use_schema_file`` and
            ``workflow_schema_file``).

    Returns:
        The schema file's text, or ``PLACEHOLDER_SCHEMA`` when the file
        is disabled, missing or unreadable.
    """
    if not settings.use_schema_file:
        return PLACEHOLDER_SCHEMA

    schema_path = settings.workflow_schema_file
    if not schema_path.is_file():
        logger.warning("Schema file not found: %s", schema_path)
        return PLACEHOLDER_SCHEMA

    try:
        return schema_path.read_text(encoding="utf-8")
    except OSError:
        logger.warning("Failed to read schema file %s", schema_path, exc_info=True)
        return PLACEHOLDER_SCHEMA


def summarize_schema_context(schema_context: str) -> str:
    """Pick the first meaningful line of a schema description.

    Leading ``--`` markers and separator lines are skipped, so a
    typical schema file yields its title line.

    Args:
        schema_context: Opaque schema description text.

    Returns:
        A single line suitable for a header comment, or ``""``.
    """
    for raw_line in schema_context.splitlines():
        line = raw_line.strip().lstrip("-").strip()
        if line and not set(line) <= {"=", "*", "/"}:
            return line
    return ""
