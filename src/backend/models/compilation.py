"""
SQL compilation models.

``CompilationResult`` is what the compiler hands back to callers.
The dataclasses below are the compiler's intermediate form: an
ordered list of insert statements that is only turned into text
by the renderer.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CompilationResult(BaseModel):
    """
    Outcome of compiling a workflow analysis into a seed script.

    ``sql`` is either the complete script (success) or None (failure),
    never a partial script.
    """

    model_config = ConfigDict(frozen=True)

    success: bool = Field(description="Whether compilation produced a script")
    sql: str | None = Field(default=None, description="The generated script (if success)")
    error_message: str | None = Field(default=None, description="Why compilation failed")
    warnings: list[str] = Field(
        default_factory=list, description="Non-blocking issues found while compiling"
    )
    elapsed_ms: float = Field(default=0.0, description="Wall-clock compilation time")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Per-section counts and generation details"
    )


# ---------------------------------------------------------------------------
# Status references
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KnownStatusId:
    """A status whose ActivityStatusID is known at compile time."""

    status_id: int
    name: str


@dataclass(frozen=True)
class StatusLookup:
    """A status whose id is looked up by title when the script runs."""

    name: str


StatusReference = KnownStatusId | StatusLookup


# ---------------------------------------------------------------------------
# Statement IR
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SqlLiteral:
    """A string literal; escaped at render time."""

    text: str


@dataclass(frozen=True)
class SqlExpression:
    """Raw SQL inserted verbatim (numbers, NULL, variables, sub-queries)."""

    sql: str


SqlValue = SqlLiteral | SqlExpression

NULL = SqlExpression("NULL")


@dataclass(frozen=True)
class ColumnValue:
    """One column/value pair of an insert, with an optional trailing comment."""

    column: str
    value: SqlValue
    comment: str | None = None


@dataclass(frozen=True)
class InsertStatement:
    """A single INSERT against one table."""

    table: str
    values: tuple[ColumnValue, ...]
    comment: str | None = None

    @property
    def columns(self) -> list[str]:
        return [value.column for value in self.values]


@dataclass
class ScriptSection:
    """A titled group of statements. Empty sections still render their header."""

    title: str
    notes: list[str] = field(default_factory=list)
    statements: list[InsertStatement] = field(default_factory=list)


@dataclass
class ScriptPlan:
    """Everything the renderer needs to produce the final script."""

    header: list[str]
    declarations: list[str]
    sections: list[ScriptSection] = field(default_factory=list)

    @property
    def statements(self) -> list[InsertStatement]:
        return [stmt for section in self.sections for stmt in section.statements]
