"""SQL string escaping.

Every piece of free text that ends up inside a generated script
(workflow name, step titles and descriptions, status names) goes
through ``escape_sql_string`` first.
"""

import re

_LINE_BREAKS = re.compile(r"\r\n|\r|\n")


def escape_sql_string(text: str | None) -> str:
    """Escape text for use inside a single-quoted T-SQL literal.

    Doubles embedded single quotes and replaces each line break
    (``\\r\\n``, ``\\r`` or ``\\n``) with one space, so multi-line
    descriptions stay on a single line.

    Args:
        text: Raw text, possibly ``None``.

    Returns:
        The escaped text (without surrounding quotes).
    """
    if not text:
        return ""
    return _LINE_BREAKS.sub(" ", text.replace("'", "''"))


def sql_literal(text: str | None) -> str:
    """Return ``text`` escaped and wrapped in single quotes."""
    return f"'{escape_sql_string(text)}'"

