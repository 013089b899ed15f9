"""Pure output validation logic.

Lint checks over a generated seed script. These are heuristics,
not a T-SQL parser: every finding is a warning, never an error.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# template + at least one activity + at least one transition
MIN_EXPECTED_INSERTS = 3

# statements start a line; rendered values never do
_INSERT_PATTERN = re.compile(r"^\s*INSERT\b", re.IGNORECASE | re.MULTILINE)

# a quoted literal (with '' escapes) or a line comment, whichever starts first
_LITERAL_OR_COMMENT = re.compile(r"'(?:[^']|'')*'|--[^\n]*")


def _blank(match: re.Match[str]) -> str:
    text = match.group(0)
    if text.startswith("'"):
        # keep line breaks so multi-line literals do not merge lines
        return "''" + "\n" * text.count("\n")
    return ""


def _strip_comments(sql: str) -> str:
    """Drop ``--`` line comments and literal contents so neither can satisfy the checks.

    A ``--`` inside a quoted literal is literal text, and a quote inside
    a comment is comment text.
    """
    return _LITERAL_OR_COMMENT.sub(_blank, sql)


def count_inserts(sql: str) -> int:
    """Count statements that start with INSERT, outside comments and literals."""
    return len(_INSERT_PATTERN.findall(_strip_comments(sql)))


def validate_output(sql: str | None, min_inserts: int = MIN_EXPECTED_INSERTS) -> list[str]:
    """Check a generated script for obvious omissions.

    Args:
        sql: The generated script text.
        min_inserts: Fewest INSERT statements a complete workflow needs.

    Returns:
        List of warning strings (empty if nothing looks wrong).
    """
    warnings: list[str] = []

    if not sql or not sql.strip():
        warnings.append("Generated SQL is empty")
        return warnings

    code = _strip_comments(sql)
    code_upper = code.upper()

    insert_count = count_inserts(sql)
    if insert_count == 0:
        warnings.append("No INSERT statements found in generated SQL")

    if "PAWSPROCESSTEMPLATE" not in code_upper:
        warnings.append("No PAWSProcessTemplate table references found")

    if "NEWID()" not in code_upper:
        warnings.append("No NEWID() calls found for uniqueidentifier columns")

    if insert_count < min_inserts:
        warnings.append(
            f"Only {insert_count} INSERT statements found, "
            f"expected at least {min_inserts} for complete workflow"
        )

    logger.info("Output validation complete: inserts=%d, warnings=%d", insert_count, len(warnings))
    return warnings
