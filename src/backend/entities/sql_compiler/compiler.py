"""Workflow-to-SQL compilation.

Compiles a workflow analysis into a PAWS seed script. Pure and
synchronous: no I/O, no shared state. Reports progress via the
``ProgressReporter`` protocol.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime

from entities.output_validator import validate_output
from entities.output_validator.validator import MIN_EXPECTED_INSERTS
from entities.shared.protocols import NoOpReporter, ProgressReporter
from models import CompilationResult, WorkflowAnalysisResult

from .planner import plan_script
from .renderer import render_script

logger = logging.getLogger(__name__)

GENERATION_METHOD = "Programmatic"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


def _failure(
    message: str,
    started: float,
    error_type: str,
    warnings: list[str] | None = None,
) -> CompilationResult:
    return CompilationResult(
        success=False,
        error_message=message,
        warnings=warnings or [],
        elapsed_ms=_elapsed_ms(started),
        metadata={
            "error_type": error_type,
            "generation_method": GENERATION_METHOD,
        },
    )


def compile_workflow(
    analysis: WorkflowAnalysisResult,
    schema_context: str = "",
    reporter: ProgressReporter = NoOpReporter(),
    *,
    min_inserts: int = MIN_EXPECTED_INSERTS,
    generated_at: datetime | None = None,
) -> CompilationResult:
    """Compile a workflow analysis into a seed script.

    Plans the template, activity, status and transition inserts in
    foreign-key order, renders them to T-SQL, and lints the output.
    Never raises: failures come back as an unsuccessful result with
    no SQL.

    Args:
        analysis: The analysis to compile. Must have ``success=True``
            and a workflow name.
        schema_context: Schema description, used only in header comments.
        reporter: Progress reporter for UI updates.
        min_inserts: Passed to the output validator.
        generated_at: Header timestamp; defaults to the current UTC time.

    Returns:
        A ``CompilationResult`` carrying the script and warnings, or an
        error message.
    """
    step_name = "Compiling SQL"
    reporter.step_start(step_name)
    started = time.perf_counter()

    try:
        if not analysis.success:
            return _failure(
                "Cannot compile from failed analysis",
                started,
                "InputInvalid",
            )

        if not analysis.workflow_name.strip():
            return _failure(
                "Cannot compile without a workflow name",
                started,
                "InputInvalid",
            )

        logger.info(
            "Compiling workflow '%s': %d steps, %d transitions, %d new statuses",
            analysis.workflow_name,
            len(analysis.steps),
            len(analysis.transitions),
            len(analysis.required_statuses),
        )

        warnings: list[str] = []
        plan = plan_script(
            analysis,
            schema_context,
            warnings,
            generated_at or datetime.now(UTC),
        )
        sql = render_script(plan)
        warnings.extend(validate_output(sql, min_inserts))

        # template, activities, statuses, transitions
        counts = [len(section.statements) for section in plan.sections]
        result = CompilationResult(
            success=True,
            sql=sql,
            warnings=warnings,
            elapsed_ms=_elapsed_ms(started),
            metadata={
                "generated_lines": len(sql.splitlines()),
                "process_template_count": counts[0],
                "activity_count": counts[1],
                "new_status_count": counts[2],
                "transition_count": counts[3],
                "generation_method": GENERATION_METHOD,
            },
        )

        logger.info(
            "Compilation completed in %.1fms with %d warnings",
            result.elapsed_ms,
            len(warnings),
        )
        return result

    except Exception as exc:
        logger.exception("Error compiling workflow SQL")
        return _failure(
            f"SQL generation failed: {exc!s}",
            started,
            type(exc).__name__,
        )
    finally:
        reporter.step_end(step_name)
