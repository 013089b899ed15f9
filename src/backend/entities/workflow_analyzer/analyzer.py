"""Workflow analysis logic.

Extracts a workflow name, ordered steps, trigger statuses and
transitions from a natural-language description using three LLM
calls. Reports progress via the ``ProgressReporter`` protocol.
"""

from __future__ import annotations

import logging
import time

from entities.shared.protocols import CompletionClient, NoOpReporter, ProgressReporter
from entities.shared.status_catalog import DEFAULT_EXISTING_STATUSES, find_in_catalog
from models import WorkflowAnalysisResult, WorkflowStatus

from .cache import AnalysisCache
from .parser import parse_json_payload, parse_statuses, parse_steps, parse_transitions
from .prompts import build_flow_prompt, build_name_prompt, build_steps_prompt

logger = logging.getLogger(__name__)

FALLBACK_NAME_WORDS = 4
FALLBACK_NAME_MAX_LENGTH = 50


def fallback_workflow_name(description: str) -> str:
    """Derive a name from the first few words of the description."""
    name = " ".join(description.split()[:FALLBACK_NAME_WORDS])
    if len(name) > FALLBACK_NAME_MAX_LENGTH:
        return name[: FALLBACK_NAME_MAX_LENGTH - 3] + "..."
    return name


def _clean_name(reply: str) -> str:
    """Take the first non-empty line of a name reply, without quotes or fences."""
    for line in reply.splitlines():
        candidate = line.strip().strip("`").strip().strip("\"'").strip()
        if candidate:
            return candidate
    return ""


def _reconcile_with_catalog(
    required: list[WorkflowStatus],
    existing: list[WorkflowStatus],
    catalog: tuple[WorkflowStatus, ...] | list[WorkflowStatus],
) -> tuple[list[WorkflowStatus], list[WorkflowStatus]]:
    """Correct the model's existing/new split against the catalog.

    A "new" status that is actually in the catalog becomes existing
    with the catalog id; an "existing" status whose id disagrees with
    the catalog takes the catalog id.
    """
    final_required: list[WorkflowStatus] = []
    final_existing: list[WorkflowStatus] = []

    for status in [*existing, *required]:
        known = find_in_catalog(catalog, status.name)
        if known is not None:
            if status.existing_id != known.existing_id:
                logger.info(
                    "Mapped status '%s' to catalog id %s", status.name, known.existing_id
                )
            final_existing.append(
                status.model_copy(update={"is_existing": True, "existing_id": known.existing_id})
            )
        elif status.is_existing:
            final_existing.append(status)
        else:
            final_required.append(status)

    return final_required, final_existing


async def analyze_workflow(
    description: str,
    client: CompletionClient,
    catalog: tuple[WorkflowStatus, ...] | list[WorkflowStatus] = DEFAULT_EXISTING_STATUSES,
    reporter: ProgressReporter = NoOpReporter(),
    cache: AnalysisCache | None = None,
    provider: str = "Unknown",
) -> WorkflowAnalysisResult:
    """Analyze a workflow description into a ``WorkflowAnalysisResult``.

    Runs the name, steps and flow prompts in order (the flow prompt
    needs the parsed steps), parses each reply (dropping malformed entries) and
    reconciles statuses against the existing-status catalog.

    Args:
        description: Natural-language workflow description.
        client: LLM client used for all three prompts.
        catalog: Statuses already present in the target database.
        reporter: Progress reporter for UI updates.
        cache: Optional cache of earlier analyses.
        provider: Provider label recorded in the metadata.

    Returns:
        A successful analysis, or one with ``success=False`` and an
        error message. Never raises.
    """
    if cache is not None:
        cached = cache.get(description, catalog)
        if cached is not None:
            logger.info("Returning cached workflow analysis")
            return cached.model_copy(
                update={"metadata": {**cached.metadata, "cached_result": True}}
            )

    step_name = "Analyzing workflow"
    reporter.step_start(step_name)
    started = time.perf_counter()

    try:
        logger.info("Starting workflow analysis (description length: %d)", len(description))

        name_reply = await client.complete(build_name_prompt(description))
        workflow_name = _clean_name(name_reply)
        if not workflow_name:
            logger.warning("Model returned an empty workflow name, using fallback")
            workflow_name = fallback_workflow_name(description)

        steps_reply = await client.complete(build_steps_prompt(description))
        steps = parse_steps(parse_json_payload(steps_reply))

        flow_reply = await client.complete(build_flow_prompt(description, steps, catalog))
        flow_payload = parse_json_payload(flow_reply)
        required, existing = _reconcile_with_catalog(*parse_statuses(flow_payload), catalog)
        transitions = parse_transitions(flow_payload)

        elapsed_ms = round((time.perf_counter() - started) * 1000, 3)
        result = WorkflowAnalysisResult(
            success=True,
            workflow_name=workflow_name,
            steps=steps,
            transitions=transitions,
            required_statuses=required,
            existing_statuses=existing,
            metadata={
                "analysis_time_ms": elapsed_ms,
                "steps_found": len(steps),
                "transitions_found": len(transitions),
                "new_statuses_needed": len(required),
                "cached_result": False,
                "ai_provider": provider,
            },
        )

        logger.info("Workflow analysis completed in %.1fms: %s", elapsed_ms, result.summary())

        if cache is not None:
            cache.put(description, result, catalog)
        return result

    except Exception as exc:
        elapsed_ms = round((time.perf_counter() - started) * 1000, 3)
        logger.exception("Workflow analysis error after %.1fms", elapsed_ms)
        return WorkflowAnalysisResult(
            success=False,
            error_message=f"AI analysis failed: {exc!s}",
            metadata={
                "analysis_time_ms": elapsed_ms,
                "error_type": type(exc).__name__,
                "cached_result": False,
            },
        )
    finally:
        reporter.step_end(step_name)
