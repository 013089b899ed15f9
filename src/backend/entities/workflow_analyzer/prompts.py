"""Prompt builders for workflow analysis."""

from __future__ import annotations

import json

from entities.shared.status_catalog import format_catalog
from models import WorkflowStatus, WorkflowStep


def build_name_prompt(description: str) -> str:
    """Build the prompt that extracts a workflow name."""
    return (
        "Extract a concise, professional name for the business workflow described below.\n"
        "\n"
        "## Rules\n"
        "- Use 1-8 words in title case (e.g. 'Purchase Order Approval').\n"
        "- The name may be a statutory form name or an acronym (e.g. 'SESOR', 'Topic 5V').\n"
        "- If the description suggests a name, use it unchanged.\n"
        "\n"
        "## Description\n"
        f"{description}\n"
        "\n"
        "Respond with the workflow name only.\n"
    )


def build_steps_prompt(description: str) -> str:
    """Build the prompt that extracts ordered workflow steps."""
    example = {
        "steps": [
            {
                "order": 1,
                "title": "Submit Request",
                "description": "Employee submits the request with supporting documents.",
                "possibleOutcomes": ["Submit for Approval", "Withdraw"],
            },
            {
                "order": 2,
                "title": "Manager Review",
                "description": "Manager reviews the request.",
                "possibleOutcomes": ["Approve", "Reject"],
            },
        ]
    }
    return (
        "Break the business workflow described below into its sequential steps.\n"
        "\n"
        "## Rules\n"
        "- Number steps from 1 with no gaps.\n"
        "- Titles are 3-6 words (max 100 characters); descriptions are 1-2 sentences "
        "(max 500 characters).\n"
        "- possibleOutcomes lists the actions a user can choose at that step.\n"
        "- Include approval, rejection and rework steps; skip sub-tasks.\n"
        "- If the description names the steps, keep those names unchanged.\n"
        "\n"
        "## Description\n"
        f"{description}\n"
        "\n"
        "Respond with a JSON object in exactly this shape:\n"
        f"{json.dumps(example, indent=2)}\n"
    )


def _format_steps(steps: list[WorkflowStep]) -> str:
    if not steps:
        return "No structured steps available"
    lines: list[str] = []
    for step in steps:
        line = f"Step {step.order}. {step.title}: {step.description}"
        if step.possible_outcomes:
            outcomes = ", ".join(f'"{outcome}"' for outcome in step.possible_outcomes)
            line += f" Possible outcomes: {outcomes}"
        lines.append(line)
    return "\n".join(lines)


def build_flow_prompt(
    description: str,
    steps: list[WorkflowStep],
    catalog: tuple[WorkflowStatus, ...] | list[WorkflowStatus],
) -> str:
    """Build the prompt that determines trigger statuses and transitions."""
    example = {
        "requiredStatuses": [
            {
                "name": "Submit for Approval",
                "description": "Send the request to the manager",
                "isExisting": True,
                "existingId": 2,
            },
            {
                "name": "Withdraw",
                "description": "Cancel the request",
                "isExisting": False,
                "existingId": None,
            },
        ],
        "transitions": [
            {
                "sourceStep": None,
                "triggerStatus": "Pending",
                "destinationStep": "Submit Request",
                "isProgressive": True,
            },
            {
                "sourceStep": "Submit Request",
                "triggerStatus": "Submit for Approval",
                "destinationStep": "Manager Review",
                "isProgressive": True,
            },
            {
                "sourceStep": "Manager Review",
                "triggerStatus": "Reject",
                "destinationStep": "Submit Request",
                "isProgressive": False,
            },
            {
                "sourceStep": "Manager Review",
                "triggerStatus": "Approve",
                "destinationStep": None,
                "isProgressive": True,
            },
        ],
    }
    return (
        "Determine the trigger statuses and transitions of the workflow below.\n"
        "\n"
        "A trigger status is an ACTION a user chooses at a step (a verb phrase such as "
        "'Submit for Approval' or 'Reject'), never a step name such as 'Draft'.\n"
        "\n"
        "## Existing Trigger Statuses\n"
        f"{format_catalog(catalog)}\n"
        "\n"
        "## Description\n"
        f"{description}\n"
        "\n"
        "## Analyzed Steps\n"
        f"{_format_steps(steps)}\n"
        "\n"
        "## Rules\n"
        "- Reuse an existing trigger status (with its id) whenever one fits.\n"
        "- List every other action as a new status with isExisting false.\n"
        "- sourceStep null marks the workflow entry; destinationStep null marks its end.\n"
        "- Use the exact step titles listed above.\n"
        "- isProgressive is false for rejection and rework paths.\n"
        "\n"
        "Respond with a JSON object in exactly this shape:\n"
        f"{json.dumps(example, indent=2)}\n"
    )
