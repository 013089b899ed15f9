"""
End-to-end generation models.

These models represent the response returned to the presentation
layer after a workflow description has been analyzed and compiled.
"""

from typing import Any

from pydantic import BaseModel, Field


class WorkflowGenerationResult(BaseModel):
    """
    Structured response from the description-to-SQL pipeline.

    Contains the generated script, any warnings to surface as UI
    hints, and metadata about both phases.
    """

    success: bool = Field(description="Whether a script was generated")

    message: str = Field(
        default="",
        description="Human-readable outcome shown to the user"
    )

    workflow_name: str | None = Field(
        default=None,
        description="Workflow name extracted during analysis"
    )

    generated_sql: str | None = Field(
        default=None,
        description="The seed script for manual review (if success)"
    )

    steps: list[str] = Field(
        default_factory=list,
        description="Display-friendly step lines, e.g. '1. Submit: Employee submits'"
    )

    warnings: list[str] = Field(
        default_factory=list,
        description="Validation and compilation warnings"
    )

    analysis_metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Details reported by the analysis phase"
    )

    compilation_metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Details reported by the compiler"
    )

    elapsed_ms: float = Field(
        default=0.0,
        description="Total processing time in milliseconds"
    )
