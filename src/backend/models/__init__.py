"""
Shared models for entities.

These models are used across the analyzer, the SQL compiler and
the generation pipeline. All models are re-exported here.
"""

from .compilation import (
    NULL,
    ColumnValue,
    CompilationResult,
    InsertStatement,
    KnownStatusId,
    ScriptPlan,
    ScriptSection,
    SqlExpression,
    SqlLiteral,
    SqlValue,
    StatusLookup,
    StatusReference,
)
from .generation import WorkflowGenerationResult
from .workflow import (
    WorkflowAnalysisResult,
    WorkflowStatus,
    WorkflowStep,
    WorkflowTransition,
)

__all__ = [
    # Workflow (analysis output)
    "WorkflowStep",
    "WorkflowStatus",
    "WorkflowTransition",
    "WorkflowAnalysisResult",
    # Compilation (compiler output and statement IR)
    "CompilationResult",
    "KnownStatusId",
    "StatusLookup",
    "StatusReference",
    "SqlLiteral",
    "SqlExpression",
    "SqlValue",
    "NULL",
    "ColumnValue",
    "InsertStatement",
    "ScriptSection",
    "ScriptPlan",
    # Generation (pipeline response)
    "WorkflowGenerationResult",
]
