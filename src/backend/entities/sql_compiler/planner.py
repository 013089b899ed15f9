"""Statement planning.

Turns a workflow analysis into a ``ScriptPlan``: an ordered list of
sections holding insert statements, in foreign-key order (process
template, activities, new statuses, transitions). Nothing here
produces SQL text beyond individual value expressions; see
``renderer`` for that.
"""

from __future__ import annotations

import logging
from datetime import datetime

from entities.shared.escaping import sql_literal
from entities.shared.schema_context import summarize_schema_context
from models import (
    NULL,
    ColumnValue,
    InsertStatement,
    KnownStatusId,
    ScriptPlan,
    ScriptSection,
    SqlExpression,
    SqlLiteral,
    StatusLookup,
    StatusReference,
    WorkflowAnalysisResult,
    WorkflowStatus,
    WorkflowStep,
    WorkflowTransition,
)

from . import id_allocator
from .status_resolver import resolve_trigger_status
from .tables import (
    ACTIVITY_TABLE,
    DEFAULT_WORKFLOW_NAME,
    PROCESS_ID_DECLARATION,
    PROCESS_ID_VARIABLE,
    PROCESS_TEMPLATE_TABLE,
    STATUS_TABLE,
    TRANSITION_TABLE,
    TRANSITION_TYPE_BACKWARD,
    TRANSITION_TYPE_FORWARD,
)

logger = logging.getLogger(__name__)

GENERATION_METHOD = "Programmatic (AI Analysis + Code Generation)"

NO_STEPS_WARNING = "No workflow steps found - no activities will be generated"
NO_TRANSITIONS_WARNING = "No workflow transitions found - workflow has no flow logic and may not function"


def _build_header(
    analysis: WorkflowAnalysisResult,
    schema_context: str,
    generated_at: datetime,
) -> list[str]:
    header = [
        "AI-GENERATED WORKFLOW SQL",
        f"Workflow Name: {analysis.workflow_name}",
        f"Generated: {generated_at:%Y-%m-%d %H:%M:%S} UTC",
        f"Steps: {len(analysis.steps)}",
        f"Transitions: {len(analysis.transitions)}",
        f"New Statuses: {len(analysis.required_statuses)}",
        f"Generation Method: {GENERATION_METHOD}",
    ]
    schema_summary = summarize_schema_context(schema_context)
    if schema_summary:
        header.append(f"Target Schema: {schema_summary}")
    return header


def _process_template_insert(workflow_name: str) -> InsertStatement:
    return InsertStatement(
        table=PROCESS_TEMPLATE_TABLE,
        values=(
            ColumnValue("[processTemplateID]", SqlExpression(PROCESS_ID_VARIABLE)),
            ColumnValue("[title]", SqlLiteral(workflow_name or DEFAULT_WORKFLOW_NAME)),
            ColumnValue("[IsArchived]", SqlExpression("0")),
            ColumnValue("[ProcessSeed]", SqlExpression("0")),
            ColumnValue("[ReassignEnabled]", SqlExpression("0")),
            ColumnValue("[ReassignCapabilityID]", NULL),
        ),
    )


def _activity_insert(step: WorkflowStep) -> InsertStatement:
    return InsertStatement(
        table=ACTIVITY_TABLE,
        comment=f"Activity {step.order}: {step.title}",
        values=(
            ColumnValue("[activityID]", id_allocator.activity_id(step.order)),
            ColumnValue("[title]", SqlLiteral(step.title)),
            ColumnValue("[description]", SqlLiteral(step.description)),
            ColumnValue("[processTemplateID]", SqlExpression(PROCESS_ID_VARIABLE)),
            ColumnValue("[DefaultOwnerRoleID]", NULL),
            ColumnValue("[IsRemoved]", SqlExpression("0")),
            ColumnValue("[SignoffText]", NULL),
            ColumnValue("[ShowSignoffText]", SqlExpression("0")),
            ColumnValue("[RequirePassword]", SqlExpression("0")),
        ),
    )


def _status_insert(status: WorkflowStatus) -> InsertStatement:
    return InsertStatement(
        table=STATUS_TABLE,
        comment=f"New Status: {status.name}",
        values=(
            ColumnValue("[ActivityStatusID]", id_allocator.status_id()),
            ColumnValue("[title]", SqlLiteral(status.name)),
        ),
    )


def activity_lookup(step_title: str) -> SqlExpression:
    """Sub-query resolving a step title to this workflow's activity id."""
    return SqlExpression(
        f"(SELECT activityID FROM {ACTIVITY_TABLE} "
        f"WHERE processTemplateID = {PROCESS_ID_VARIABLE} AND title = {sql_literal(step_title)})"
    )


def status_value(reference: StatusReference) -> SqlExpression:
    """Render a status reference as a value expression."""
    match reference:
        case KnownStatusId(status_id=status_id):
            return SqlExpression(str(status_id))
        case StatusLookup(name=name):
            return SqlExpression(
                f"(SELECT ActivityStatusID FROM {STATUS_TABLE} WHERE title = {sql_literal(name)})"
            )
    raise TypeError(f"Unsupported status reference: {reference!r}")


def _endpoint(step_title: str | None, sentinel_comment: str) -> tuple[SqlExpression, str | None]:
    if step_title is None:
        return NULL, sentinel_comment
    return activity_lookup(step_title), None


def _transition_insert(
    transition: WorkflowTransition,
    analysis: WorkflowAnalysisResult,
    warnings: list[str],
) -> InsertStatement:
    source_value, source_comment = _endpoint(transition.source_step, "Workflow start")
    destination_value, destination_comment = _endpoint(transition.destination_step, "Workflow end")
    reference = resolve_trigger_status(transition.trigger_status, analysis, warnings)

    if transition.is_progressive:
        transition_type, type_label = TRANSITION_TYPE_FORWARD, "Forward"
    else:
        transition_type, type_label = TRANSITION_TYPE_BACKWARD, "Backward"

    return InsertStatement(
        table=TRANSITION_TABLE,
        comment=f"Transition: {transition.describe()}",
        values=(
            ColumnValue("[SourceActivityID]", source_value, source_comment),
            ColumnValue("[DestinationActivityID]", destination_value, destination_comment),
            ColumnValue("[TriggerStatusID]", status_value(reference), transition.trigger_status),
            ColumnValue("[Operator]", SqlExpression("0"), "Default operator"),
            ColumnValue("[TransitionType]", SqlExpression(str(transition_type)), type_label),
            ColumnValue("[IsCommentRequired]", SqlExpression("0"), "Comment not required"),
            ColumnValue("[DestinationOwnerRequired]", SqlExpression("0"), "Owner assignment not required"),
            ColumnValue("[DestinationTransitionGroup]", NULL, "No destination group"),
            ColumnValue("[MUTHandler]", NULL, "No custom handler"),
            ColumnValue("[MUTTags]", NULL, "No tags"),
        ),
    )


def _check_duplicate_titles(analysis: WorkflowAnalysisResult, warnings: list[str]) -> None:
    # default collations compare case-insensitively and ignore trailing spaces
    seen: dict[str, str] = {}
    reported: set[str] = set()
    for step in analysis.ordered_steps:
        key = step.title.rstrip().casefold()
        if key not in seen:
            seen[key] = step.title
        elif key not in reported:
            reported.add(key)
            warnings.append(
                f"Duplicate step title '{seen[key]}' - "
                f"activity lookups by this title will match more than one row"
            )


def _check_step_references(analysis: WorkflowAnalysisResult, warnings: list[str]) -> None:
    titles = analysis.step_titles
    for transition in analysis.transitions:
        for title in (transition.source_step, transition.destination_step):
            if title is not None and title not in titles:
                warnings.append(
                    f"Transition {transition.describe()} references unknown step '{title}' - "
                    f"its activity lookup will return NULL"
                )


def plan_script(
    analysis: WorkflowAnalysisResult,
    schema_context: str,
    warnings: list[str],
    generated_at: datetime,
) -> ScriptPlan:
    """Build the ordered statement plan for a workflow.

    Args:
        analysis: A successful workflow analysis.
        schema_context: Opaque schema description (summarized in the header).
        warnings: Caller-owned list that receives warning strings.
        generated_at: Timestamp written into the header.

    Returns:
        A ``ScriptPlan`` with all four sections, in foreign-key order.
    """
    plan = ScriptPlan(
        header=_build_header(analysis, schema_context, generated_at),
        declarations=[PROCESS_ID_DECLARATION],
    )

    plan.sections.append(
        ScriptSection(
            title="1. WORKFLOW PROCESS TEMPLATE",
            statements=[_process_template_insert(analysis.workflow_name)],
        )
    )

    activities = ScriptSection(title="2. WORKFLOW ACTIVITIES (STEPS)")
    if analysis.steps:
        activities.statements = [_activity_insert(step) for step in analysis.ordered_steps]
        _check_duplicate_titles(analysis, warnings)
    else:
        activities.notes.append("No workflow steps found - no activities generated")
        warnings.append(NO_STEPS_WARNING)
    plan.sections.append(activities)

    statuses = ScriptSection(title="3. NEW ACTIVITY STATUSES")
    if analysis.required_statuses:
        statuses.notes.append("These statuses need to be added to PAWSActivityStatus")
        statuses.statements = [_status_insert(status) for status in analysis.required_statuses]
    else:
        statuses.notes.append("No new statuses required - using existing PAWS statuses")
    plan.sections.append(statuses)

    transitions = ScriptSection(title="4. WORKFLOW TRANSITIONS (FLOW LOGIC)")
    if analysis.transitions:
        transitions.notes.append("These define how the workflow moves between steps")
        _check_step_references(analysis, warnings)
        transitions.statements = [
            _transition_insert(transition, analysis, warnings)
            for transition in analysis.transitions
        ]
    else:
        transitions.notes.append("No transitions found - workflow has no flow logic")
        warnings.append(NO_TRANSITIONS_WARNING)
    plan.sections.append(transitions)

    logger.debug(
        "Planned %d statements across %d sections",
        len(plan.statements),
        len(plan.sections),
    )
    return plan
