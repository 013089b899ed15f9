"""
Catalog of trigger statuses already present in PAWSActivityStatus.

The analyzer offers these to the model so it can reuse existing ids
instead of asking for new rows. The list is hand-maintained to match
the target database; callers can pass their own catalog instead.
"""

from models import WorkflowStatus

DEFAULT_EXISTING_STATUSES: tuple[WorkflowStatus, ...] = (
    WorkflowStatus(
        name="Pending",
        existing_id=1,
        is_existing=True,
        description="Initial state, waiting for action",
    ),
    WorkflowStatus(
        name="Submit for Approval",
        existing_id=2,
        is_existing=True,
        description="Request submitted and waiting for approval",
    ),
    WorkflowStatus(
        name="Approve",
        existing_id=3,
        is_existing=True,
        description="Request has been approved",
    ),
    WorkflowStatus(
        name="Reject",
        existing_id=7,
        is_existing=True,
        description="Request has been rejected",
    ),
    WorkflowStatus(
        name="Submit Draft",
        existing_id=17,
        is_existing=True,
        description="Save as draft for later submission",
    ),
    WorkflowStatus(
        name="Submit for Review",
        existing_id=18,
        is_existing=True,
        description="Submit for initial review",
    ),
    WorkflowStatus(
        name="Review and Close",
        existing_id=19,
        is_existing=True,
        description="Final review and close the process",
    ),
)


def format_catalog(statuses: tuple[WorkflowStatus, ...] | list[WorkflowStatus]) -> str:
    """Render the catalog as prompt lines: ``- Name (ID: n) - description``."""
    return "\n".join(
        f"- {status.name} (ID: {status.existing_id}) - {status.description}" for status in statuses
    )


def find_in_catalog(
    statuses: tuple[WorkflowStatus, ...] | list[WorkflowStatus], name: str
) -> WorkflowStatus | None:
    """Case-insensitive lookup of a status by name."""
    return next((status for status in statuses if status.matches(name)), None)
