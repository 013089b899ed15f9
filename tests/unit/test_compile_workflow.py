"""Unit tests for the compile_workflow() function.

Tests cover the precondition failures, the four reference scenarios
(single step, unknown status, no transitions, apostrophes), section
ordering, metadata, determinism, and fault handling.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from entities.sql_compiler import compile_workflow
from entities.sql_compiler.planner import NO_TRANSITIONS_WARNING
from models import WorkflowStatus, WorkflowStep, WorkflowTransition

from tests.conftest import SpyReporter, make_analysis

FIXED_TIME = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)


def _single_step_analysis(**overrides):
    """Scenario A: one step entered from START via the existing 'Pending' status."""
    params = {
        "workflow_name": "Leave Request",
        "steps": [WorkflowStep(order=1, title="Submit", description="Employee submits request")],
        "transitions": [
            WorkflowTransition(
                source_step=None,
                trigger_status="Pending",
                destination_step="Submit",
                is_progressive=True,
            )
        ],
        "existing": [WorkflowStatus(name="Pending", is_existing=True, existing_id=1)],
    }
    params.update(overrides)
    return make_analysis(**params)


# ── Preconditions ─────────────────────────────────────────────────────


class TestPreconditions:
    """Inputs that must fail without producing any SQL."""

    def test_failed_analysis(self) -> None:
        """A failed analysis is rejected with no partial output."""
        result = compile_workflow(make_analysis(success=False))

        assert result.success is False
        assert result.sql is None
        assert "failed analysis" in (result.error_message or "").lower()
        assert result.metadata["error_type"] == "InputInvalid"

    def test_blank_workflow_name(self) -> None:
        """A blank workflow name is reported as the missing precondition."""
        result = compile_workflow(make_analysis(workflow_name="   "))

        assert result.success is False
        assert result.sql is None
        assert "workflow name" in (result.error_message or "").lower()

    def test_failure_still_reports_progress(self, spy_reporter: SpyReporter) -> None:
        """The reporter sees start and end even when compilation fails."""
        compile_workflow(make_analysis(success=False), reporter=spy_reporter)

        assert spy_reporter.events == [
            {"step": "Compiling SQL", "status": "started"},
            {"step": "Compiling SQL", "status": "completed"},
        ]


# ── Scenario A ────────────────────────────────────────────────────────


class TestSingleStepWorkflow:
    """One step, one entry transition, one existing status."""

    @pytest.fixture
    def sql(self) -> str:
        result = compile_workflow(_single_step_analysis(), generated_at=FIXED_TIME)
        assert result.success is True
        assert result.sql is not None
        return result.sql

    def test_one_insert_per_table(self, sql: str) -> None:
        """Template, activity and transition each get exactly one insert."""
        assert sql.count("INSERT INTO [paws].[PAWSProcessTemplate]") == 1
        assert sql.count("INSERT INTO [paws].[PAWSActivity] (") == 1
        assert sql.count("INSERT INTO [paws].[PAWSActivityStatus]") == 0
        assert sql.count("INSERT INTO [paws].[PAWSActivityTransition]") == 1

    def test_empty_status_section_is_explained(self, sql: str) -> None:
        """The status section header and an explanatory comment still appear."""
        assert "-- 3. NEW ACTIVITY STATUSES" in sql
        assert "-- No new statuses required - using existing PAWS statuses" in sql

    def test_trigger_is_literal_existing_id(self, sql: str) -> None:
        """The existing 'Pending' status is emitted as the literal 1."""
        assert "    1, -- Pending" in sql

    def test_entry_transition_source_is_null(self, sql: str) -> None:
        """A transition without a source starts the workflow with NULL."""
        assert "    NULL, -- Workflow start" in sql

    def test_destination_is_activity_lookup(self, sql: str) -> None:
        """The destination resolves the activity by process id and title."""
        assert (
            "(SELECT activityID FROM [paws].[PAWSActivity] "
            "WHERE processTemplateID = @processId AND title = 'Submit')"
        ) in sql

    def test_header_and_declaration(self, sql: str) -> None:
        """The header names the workflow and the process id is declared once."""
        assert "-- Workflow Name: Leave Request" in sql
        assert "-- Generated: 2026-01-02 03:04:05 UTC" in sql
        assert sql.count("DECLARE @processId uniqueidentifier = NEWID();") == 1

    def test_activity_id_uses_allocator(self, sql: str) -> None:
        """The activity id is max + order, not a hard-coded constant."""
        assert "ISNULL((SELECT MAX(activityID) FROM [paws].[PAWSActivity]), 0) + 1," in sql

    def test_template_columns_in_contract_order(self, sql: str) -> None:
        """Template columns appear in the fixed schema order."""
        columns = [
            "[processTemplateID]",
            "[title]",
            "[IsArchived]",
            "[ProcessSeed]",
            "[ReassignEnabled]",
            "[ReassignCapabilityID]",
        ]
        start = sql.index("INSERT INTO [paws].[PAWSProcessTemplate]")
        positions = [sql.index(column, start) for column in columns]
        assert positions == sorted(positions)

    def test_no_output_warnings(self) -> None:
        """A complete single-step workflow raises no warnings."""
        result = compile_workflow(_single_step_analysis(), generated_at=FIXED_TIME)

        assert result.warnings == []


# ── Scenario B ────────────────────────────────────────────────────────


class TestUnknownTriggerStatus:
    """A trigger status found in neither status set."""

    def test_lookup_subquery_and_warning(self) -> None:
        """'Escalate' becomes a status lookup and a warning names it."""
        analysis = _single_step_analysis(
            transitions=[
                WorkflowTransition(source_step=None, trigger_status="Pending", destination_step="Submit"),
                WorkflowTransition(source_step="Submit", trigger_status="Escalate", destination_step=None),
            ]
        )

        result = compile_workflow(analysis, generated_at=FIXED_TIME)

        assert result.success is True
        assert result.sql is not None
        assert (
            "(SELECT ActivityStatusID FROM [paws].[PAWSActivityStatus] WHERE title = 'Escalate')"
            in result.sql
        )
        assert any("Escalate" in warning for warning in result.warnings)

    def test_required_status_is_inserted_then_looked_up(self) -> None:
        """A new status gets an insert and transitions look it up by title."""
        analysis = _single_step_analysis(
            transitions=[
                WorkflowTransition(source_step=None, trigger_status="Pending", destination_step="Submit"),
                WorkflowTransition(source_step="Submit", trigger_status="withdraw", destination_step=None),
            ],
            required=[WorkflowStatus(name="Withdraw", description="Cancel the request")],
        )

        result = compile_workflow(analysis, generated_at=FIXED_TIME)

        assert result.sql is not None
        status_insert = result.sql.index("INSERT INTO [paws].[PAWSActivityStatus]")
        transition_insert = result.sql.index("INSERT INTO [paws].[PAWSActivityTransition]")
        assert status_insert < transition_insert
        assert "WHERE title = 'Withdraw')" in result.sql
        assert result.metadata["new_status_count"] == 1


# ── Scenario C ────────────────────────────────────────────────────────


class TestNoTransitions:
    """A workflow with steps but no flow logic."""

    def test_succeeds_with_warning(self) -> None:
        """Compilation succeeds, warns, and keeps template and activities."""
        result = compile_workflow(make_analysis(transitions=[]), generated_at=FIXED_TIME)

        assert result.success is True
        assert result.sql is not None
        assert NO_TRANSITIONS_WARNING in result.warnings
        assert "INSERT INTO [paws].[PAWSProcessTemplate]" in result.sql
        assert result.sql.count("INSERT INTO [paws].[PAWSActivity] (") == 2
        assert "-- 4. WORKFLOW TRANSITIONS (FLOW LOGIC)" in result.sql
        assert result.metadata["transition_count"] == 0

    def test_no_steps_is_degraded_not_failed(self) -> None:
        """No steps: still a script, with comments and warnings."""
        result = compile_workflow(make_analysis(steps=[], transitions=[]), generated_at=FIXED_TIME)

        assert result.success is True
        assert result.sql is not None
        assert "-- No workflow steps found - no activities generated" in result.sql
        assert any("no activities" in warning for warning in result.warnings)
        assert any("INSERT statements found" in warning for warning in result.warnings)

    def test_insert_in_step_title_does_not_hide_short_script(self) -> None:
        """A step titled 'Insert ...' is a value, not a statement."""
        analysis = make_analysis(
            steps=[WorkflowStep(order=1, title="Insert invoice", description="Insert the invoice")],
            transitions=[],
        )

        result = compile_workflow(analysis, generated_at=FIXED_TIME)

        assert (
            "Only 2 INSERT statements found, expected at least 3 for complete workflow"
            in result.warnings
        )


# ── Scenario D ────────────────────────────────────────────────────────


class TestEscaping:
    """Free text is escaped wherever it lands in the script."""

    def test_apostrophe_in_description(self) -> None:
        """A single quote in a description is doubled inside the literal."""
        analysis = _single_step_analysis(
            steps=[WorkflowStep(order=1, title="Submit", description="Manager's review")]
        )

        result = compile_workflow(analysis, generated_at=FIXED_TIME)

        assert result.sql is not None
        assert "'Manager''s review'" in result.sql

    def test_quotes_are_never_left_single(self) -> None:
        """Quotes in names, titles and comments keep the script balanced."""
        analysis = _single_step_analysis(
            workflow_name="O'Brien's 'Form'",
            steps=[WorkflowStep(order=1, title="Submit", description="It's\nmulti-line")],
        )

        result = compile_workflow(analysis, generated_at=FIXED_TIME)

        assert result.sql is not None
        assert "'O''Brien''s ''Form'''" in result.sql
        assert "'It''s multi-line'" in result.sql
        assert result.sql.count("'") % 2 == 0


# ── Ordering and metadata ─────────────────────────────────────────────


class TestOrderingAndMetadata:
    """Section order, step order, and reported counts."""

    def test_sections_in_foreign_key_order(self, analysis) -> None:
        """Template, activities, statuses, transitions, in that order."""
        result = compile_workflow(analysis, generated_at=FIXED_TIME)
        assert result.sql is not None

        headers = [
            "-- 1. WORKFLOW PROCESS TEMPLATE",
            "-- 2. WORKFLOW ACTIVITIES (STEPS)",
            "-- 3. NEW ACTIVITY STATUSES",
            "-- 4. WORKFLOW TRANSITIONS (FLOW LOGIC)",
        ]
        positions = [result.sql.index(header) for header in headers]
        assert positions == sorted(positions)

    def test_activities_follow_step_order(self) -> None:
        """Steps supplied out of order are emitted in ascending order."""
        steps = [
            WorkflowStep(order=3, title="Close", description="Closed"),
            WorkflowStep(order=1, title="Open", description="Opened"),
            WorkflowStep(order=2, title="Review", description="Reviewed"),
        ]
        result = compile_workflow(make_analysis(steps=steps, transitions=[]), generated_at=FIXED_TIME)
        assert result.sql is not None

        positions = [
            result.sql.index(f"-- Activity {order}: {title}")
            for order, title in [(1, "Open"), (2, "Review"), (3, "Close")]
        ]
        assert positions == sorted(positions)
        assert "), 0) + 3," in result.sql

    def test_metadata_counts(self, analysis) -> None:
        """Metadata records per-section counts and the line count."""
        result = compile_workflow(analysis, generated_at=FIXED_TIME)
        assert result.sql is not None

        assert result.metadata["process_template_count"] == 1
        assert result.metadata["activity_count"] == 2
        assert result.metadata["new_status_count"] == 0
        assert result.metadata["transition_count"] == 4
        assert result.metadata["generated_lines"] == len(result.sql.splitlines())
        assert result.metadata["generation_method"] == "Programmatic"

    def test_backward_transition_type(self, analysis) -> None:
        """Rework paths use transition type 2, forward paths type 1."""
        result = compile_workflow(analysis, generated_at=FIXED_TIME)
        assert result.sql is not None

        assert result.sql.count("    1, -- Forward") == 3
        assert result.sql.count("    2, -- Backward") == 1

    def test_schema_context_summarized_in_header(self, analysis) -> None:
        """The first meaningful schema line is quoted in the header."""
        result = compile_workflow(
            analysis,
            "-- ====\n-- PAWS WORKFLOW SYSTEM SCHEMA\nCREATE TABLE x (id int);",
            generated_at=FIXED_TIME,
        )
        assert result.sql is not None

        assert "-- Target Schema: PAWS WORKFLOW SYSTEM SCHEMA" in result.sql
        assert "CREATE TABLE" not in result.sql


# ── Determinism ───────────────────────────────────────────────────────


class TestDeterminism:
    """Compiling the same analysis twice."""

    def test_same_timestamp_is_byte_identical(self, analysis) -> None:
        first = compile_workflow(analysis, generated_at=FIXED_TIME)
        second = compile_workflow(analysis, generated_at=FIXED_TIME)

        assert first.sql == second.sql
        assert first.warnings == second.warnings

    def test_only_timestamp_line_differs(self, analysis) -> None:
        first = compile_workflow(analysis, generated_at=FIXED_TIME)
        second = compile_workflow(analysis, generated_at=datetime(2027, 5, 6, tzinfo=UTC))
        assert first.sql is not None
        assert second.sql is not None

        differing = [
            (a, b)
            for a, b in zip(first.sql.splitlines(), second.sql.splitlines(), strict=True)
            if a != b
        ]
        assert len(differing) == 1
        assert differing[0][0].startswith("-- Generated:")

    def test_input_is_not_mutated(self, analysis) -> None:
        before = analysis.model_dump()
        compile_workflow(analysis, generated_at=FIXED_TIME)

        assert analysis.model_dump() == before


# ── Fault handling ────────────────────────────────────────────────────


class TestFaultHandling:
    """Unexpected errors become failed results."""

    def test_renderer_error_is_wrapped(self, analysis, monkeypatch: pytest.MonkeyPatch) -> None:
        """An exception during emission never propagates."""

        def _boom(plan):
            raise RuntimeError("renderer exploded")

        monkeypatch.setattr("entities.sql_compiler.compiler.render_script", _boom)

        result = compile_workflow(analysis, generated_at=FIXED_TIME)

        assert result.success is False
        assert result.sql is None
        assert "renderer exploded" in (result.error_message or "")
        assert result.metadata["error_type"] == "RuntimeError"
        assert result.elapsed_ms >= 0

    def test_non_positive_step_order(self) -> None:
        """A step order the allocator cannot use fails the compilation."""
        analysis = make_analysis(
            steps=[WorkflowStep(order=0, title="Submit", description="Submit")],
            transitions=[],
        )

        result = compile_workflow(analysis, generated_at=FIXED_TIME)

        assert result.success is False
        assert result.sql is None
        assert result.metadata["error_type"] == "ValueError"
