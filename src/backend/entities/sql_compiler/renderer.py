"""T-SQL rendering for a ``ScriptPlan``.

This is the only module that knows how statements look as text.
Literals and comments are escaped here, so planned values can hold
raw user text.
"""

from __future__ import annotations

from entities.shared.escaping import escape_sql_string
from models import ColumnValue, InsertStatement, ScriptPlan, ScriptSection, SqlLiteral

SEPARATOR = "-- " + "=" * 48
INDENT = "    "


def _comment(text: str) -> str:
    return f"-- {escape_sql_string(text)}"


def _render_value(column_value: ColumnValue) -> str:
    value = column_value.value
    if isinstance(value, SqlLiteral):
        return f"'{escape_sql_string(value.text)}'"
    return value.sql


def render_statement(statement: InsertStatement) -> list[str]:
    """Render one INSERT, one column and one value per line."""
    lines: list[str] = []
    if statement.comment:
        lines.append(_comment(statement.comment))

    lines.append(f"INSERT INTO {statement.table} (")
    last = len(statement.values) - 1
    for index, column_value in enumerate(statement.values):
        separator = "," if index < last else ""
        lines.append(f"{INDENT}{column_value.column}{separator}")

    lines.append(") VALUES (")
    for index, column_value in enumerate(statement.values):
        line = f"{INDENT}{_render_value(column_value)}"
        if index < last:
            line += ","
        if column_value.comment:
            line += f" {_comment(column_value.comment)}"
        lines.append(line)

    lines.append(");")
    lines.append("")
    return lines


def _render_section(section: ScriptSection) -> list[str]:
    lines = [SEPARATOR, _comment(section.title), SEPARATOR]
    lines.extend(_comment(note) for note in section.notes)
    lines.append("")
    for statement in section.statements:
        lines.extend(render_statement(statement))
    return lines


def render_script(plan: ScriptPlan) -> str:
    """Serialize a plan to the final script text.

    Layout: header comment block, variable declarations, then each
    section with its banner, notes and statements. Sections with no
    statements still render their banner and notes.

    Args:
        plan: The statement plan produced by ``plan_script``.

    Returns:
        The complete script, ending with a newline.
    """
    title, *details = plan.header or [""]
    lines = [SEPARATOR, _comment(title), SEPARATOR]
    lines.extend(_comment(detail) for detail in details)
    lines.append(SEPARATOR)
    lines.append("")

    lines.extend(plan.declarations)
    lines.append("")

    for section in plan.sections:
        lines.extend(_render_section(section))

    return "\n".join(lines).rstrip("\n") + "\n"
