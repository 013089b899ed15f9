"""
Workflow analysis models.

These models represent the structured workflow extracted from a
natural-language description: steps, trigger statuses, and the
transitions between steps. Steps and statuses are keyed by name,
since numeric ids only exist once the generated script runs.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

STEP_TITLE_MAX_LENGTH = 100
STEP_DESCRIPTION_MAX_LENGTH = 500
STATUS_NAME_MAX_LENGTH = 100


class WorkflowStep(BaseModel):
    """A single step (activity) in a workflow."""

    model_config = ConfigDict(frozen=True)

    order: int = Field(description="1-based position of the step in the workflow")
    title: str = Field(description="Concise step name, e.g. 'Manager Review'")
    description: str = Field(default="", description="What happens in this step")
    possible_outcomes: list[str] = Field(
        default_factory=list,
        description="Actions a user may take from this step (used only for analysis prompts)",
    )

    def validate_step(self) -> list[str]:
        """Return validation issues for this step (empty if valid)."""
        issues: list[str] = []

        if self.order <= 0:
            issues.append("Step order must be greater than 0")
        if not self.title.strip():
            issues.append("Step title is required")
        if not self.description.strip():
            issues.append(f"Step '{self.title}' description is required")
        if len(self.title) > STEP_TITLE_MAX_LENGTH:
            issues.append(
                f"Step title '{self.title[:20]}...' should be "
                f"{STEP_TITLE_MAX_LENGTH} characters or less"
            )
        if len(self.description) > STEP_DESCRIPTION_MAX_LENGTH:
            issues.append(
                f"Step '{self.title}' description should be "
                f"{STEP_DESCRIPTION_MAX_LENGTH} characters or less"
            )

        return issues

    def __str__(self) -> str:
        return f"{self.order}. {self.title}"


class WorkflowStatus(BaseModel):
    """
    A trigger status, either already present in the status lookup
    table or one the generated script has to insert.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Status name, e.g. 'Submit for Approval'")
    description: str = Field(default="", description="When this status is used")
    is_existing: bool = Field(
        default=False, description="Whether the status already exists in the lookup table"
    )
    existing_id: int | None = Field(
        default=None, description="ActivityStatusID of an existing status"
    )
    suggested_id: int | None = Field(
        default=None, description="Advisory id for a new status; never used in generated SQL"
    )

    def validate_status(self) -> list[str]:
        """Return validation issues for this status (empty if valid)."""
        issues: list[str] = []

        if not self.name.strip():
            issues.append("Status name is required")
        if self.is_existing and self.existing_id is None:
            issues.append(f"Existing status '{self.name}' must have an existing_id")
        if len(self.name) > STATUS_NAME_MAX_LENGTH:
            issues.append(
                f"Status name '{self.name[:20]}...' should be "
                f"{STATUS_NAME_MAX_LENGTH} characters or less"
            )

        return issues

    def matches(self, name: str) -> bool:
        """Case-insensitive name comparison, ignoring surrounding whitespace."""
        return self.name.strip().casefold() == name.strip().casefold()

    def __str__(self) -> str:
        if self.is_existing:
            return f"{self.name} (ID: {self.existing_id})"
        return f"{self.name} (New)"


class WorkflowTransition(BaseModel):
    """
    A directed edge between two steps guarded by a trigger status.

    A missing ``source_step`` marks the workflow entry and a missing
    ``destination_step`` marks its termination.
    """

    model_config = ConfigDict(frozen=True)

    source_step: str | None = Field(default=None, description="Source step title (None = start)")
    trigger_status: str = Field(description="Name of the status that fires this transition")
    destination_step: str | None = Field(
        default=None, description="Destination step title (None = end)"
    )
    is_progressive: bool = Field(
        default=True, description="True for forward flow, False for rework/rejection"
    )

    def describe(self) -> str:
        """Human-readable ``source -> [trigger] -> destination`` label."""
        source = self.source_step or "WORKFLOW START"
        destination = self.destination_step or "WORKFLOW END"
        return f"{source} -> [{self.trigger_status}] -> {destination}"


class WorkflowAnalysisResult(BaseModel):
    """
    Result of analyzing a workflow description.

    Created once per request and handed to the SQL compiler
    unchanged. If ``success`` is False, ``error_message`` says why.
    """

    model_config = ConfigDict(frozen=True)

    success: bool = Field(description="Whether the analysis succeeded")
    error_message: str | None = Field(default=None, description="Reason the analysis failed")
    workflow_name: str = Field(default="", description="Business name of the workflow")
    steps: list[WorkflowStep] = Field(default_factory=list)
    transitions: list[WorkflowTransition] = Field(default_factory=list)
    required_statuses: list[WorkflowStatus] = Field(
        default_factory=list, description="New statuses the generated script must insert"
    )
    existing_statuses: list[WorkflowStatus] = Field(
        default_factory=list, description="Statuses already present in the lookup table"
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Analysis timing, provider and cache details"
    )

    @property
    def all_statuses(self) -> list[WorkflowStatus]:
        return [*self.required_statuses, *self.existing_statuses]

    @property
    def ordered_steps(self) -> list[WorkflowStep]:
        return sorted(self.steps, key=lambda step: step.order)

    @property
    def step_titles(self) -> set[str]:
        return {step.title for step in self.steps}

    def validate_result(self) -> list[str]:
        """Check that the analysis has everything needed to compile.

        Returns:
            List of human-readable issues, empty if the result is complete.
        """
        issues: list[str] = []

        if not self.success:
            if not self.error_message:
                issues.append("Failed analysis must have an error message")
            return issues

        if not self.workflow_name.strip():
            issues.append("Workflow name is required")

        if not self.steps:
            issues.append("At least one workflow step is required")
        else:
            for expected, step in enumerate(self.ordered_steps, start=1):
                if step.order != expected:
                    issues.append(f"Step ordering gap: expected {expected}, found {step.order}")
            for step in self.steps:
                issues.extend(step.validate_step())

        if not self.all_statuses:
            issues.append("At least one status is required for the workflow")
        for status in self.all_statuses:
            issues.extend(status.validate_status())

        titles = self.step_titles
        for transition in self.transitions:
            for title in (transition.source_step, transition.destination_step):
                if title is not None and title not in titles:
                    issues.append(
                        f"Transition {transition.describe()} references unknown step '{title}'"
                    )

        return issues

    def summary(self) -> str:
        """One-line summary for logging or display."""
        if not self.success:
            return f"Analysis failed: {self.error_message}"
        return (
            f"'{self.workflow_name}' - {len(self.steps)} steps, "
            f"{len(self.existing_statuses)} existing statuses, "
            f"{len(self.required_statuses)} new statuses needed"
        )
