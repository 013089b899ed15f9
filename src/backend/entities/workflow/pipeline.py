"""
Description-to-SQL pipeline.

1. Validate the description
2. Analyze it into steps, statuses and transitions (LLM)
3. Check the analysis and load the schema context
4. Compile the analysis into a seed script

The compiler never sees the raw description and the analyzer never
produces SQL; this module is the only place the two meet.
"""

from __future__ import annotations

import logging
import time

from config.settings import Settings, get_settings
from entities.shared.protocols import CompletionClient, NoOpReporter, ProgressReporter
from entities.shared.schema_context import load_schema_context
from entities.shared.status_catalog import DEFAULT_EXISTING_STATUSES
from entities.sql_compiler import compile_workflow
from entities.workflow_analyzer import AnalysisCache, analyze_workflow, get_analysis_cache
from models import WorkflowGenerationResult, WorkflowStatus, WorkflowStep

logger = logging.getLogger(__name__)


def _format_step(step: WorkflowStep) -> str:
    display = f"{step.order}. {step.title}"
    if step.description:
        display += f": {step.description}"
    return display


async def generate_workflow_sql(
    description: str,
    client: CompletionClient,
    settings: Settings | None = None,
    reporter: ProgressReporter = NoOpReporter(),
    catalog: tuple[WorkflowStatus, ...] | list[WorkflowStatus] = DEFAULT_EXISTING_STATUSES,
    cache: AnalysisCache | None = None,
) -> WorkflowGenerationResult:
    """Turn a workflow description into a reviewed seed script.

    Args:
        description: Natural-language workflow description.
        client: LLM client for the analysis phase.
        settings: Application settings; defaults to ``get_settings()``.
        reporter: Progress reporter for UI updates.
        catalog: Statuses already present in the target database.
        cache: Analysis cache; defaults to the process-wide cache.

    Returns:
        A ``WorkflowGenerationResult``. Analysis and compilation failures
        are reported in ``message``; nothing is raised.
    """
    settings = settings or get_settings()
    if cache is None:
        cache = get_analysis_cache(settings)
    started = time.perf_counter()

    if not description or not description.strip():
        return WorkflowGenerationResult(
            success=False,
            message="Workflow description cannot be empty",
        )

    analysis = await analyze_workflow(
        description,
        client,
        catalog=catalog,
        reporter=reporter,
        cache=cache,
    )

    if not analysis.success:
        logger.error("Workflow analysis failed: %s", analysis.error_message)
        return WorkflowGenerationResult(
            success=False,
            message=f"Workflow analysis failed: {analysis.error_message}",
            analysis_metadata=analysis.metadata,
            elapsed_ms=round((time.perf_counter() - started) * 1000, 3),
        )

    issues = analysis.validate_result()
    for issue in issues:
        logger.warning("Analysis issue: %s", issue)

    schema_context = load_schema_context(settings)
    compilation = compile_workflow(
        analysis,
        schema_context,
        reporter,
        min_inserts=settings.min_expected_inserts,
    )

    if compilation.success:
        message = "Workflow successfully processed and SQL generated"
        logger.info("Workflow processing completed for '%s'", analysis.workflow_name)
    else:
        message = f"Analysis completed but SQL generation failed: {compilation.error_message}"
        logger.warning(
            "SQL generation failed for workflow '%s': %s",
            analysis.workflow_name,
            compilation.error_message,
        )

    return WorkflowGenerationResult(
        success=compilation.success,
        message=message,
        workflow_name=analysis.workflow_name,
        generated_sql=compilation.sql,
        steps=[_format_step(step) for step in analysis.ordered_steps],
        warnings=[*issues, *compilation.warnings],
        analysis_metadata=analysis.metadata,
        compilation_metadata=compilation.metadata,
        elapsed_ms=round((time.perf_counter() - started) * 1000, 3),
    )
