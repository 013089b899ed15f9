"""Shared test fixtures for the workflow SQL compiler."""

import sys
from pathlib import Path

import pytest

# Ensure src/backend/ is on the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src" / "backend"))

from config.settings import Settings
from entities.shared.protocols import NoOpReporter
from models import WorkflowAnalysisResult, WorkflowStatus, WorkflowStep, WorkflowTransition

# ---------------------------------------------------------------------------
# Protocol fakes
# ---------------------------------------------------------------------------


class FakeCompletionClient:
    """In-memory fake satisfying the ``CompletionClient`` protocol.

    Returns canned replies in order and records every prompt. An
    exception placed in ``replies`` is raised instead of returned.
    """

    def __init__(self, replies: list[str | Exception] | None = None) -> None:
        self.replies: list[str | Exception] = list(replies or [])
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        """Pop the next canned reply."""
        self.prompts.append(prompt)
        if not self.replies:
            return ""
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class SpyReporter:
    """Spy satisfying the ``ProgressReporter`` protocol.

    Captures every ``step_start`` / ``step_end`` call for assertions.
    """

    def __init__(self) -> None:
        self.events: list[dict[str, str]] = []

    def step_start(self, step: str) -> None:
        """Record a step-start event."""
        self.events.append({"step": step, "status": "started"})

    def step_end(self, step: str) -> None:
        """Record a step-end event."""
        self.events.append({"step": step, "status": "completed"})


# ---------------------------------------------------------------------------
# Model builders
# ---------------------------------------------------------------------------


def make_analysis(
    *,
    workflow_name: str = "Leave Request",
    steps: list[WorkflowStep] | None = None,
    transitions: list[WorkflowTransition] | None = None,
    required: list[WorkflowStatus] | None = None,
    existing: list[WorkflowStatus] | None = None,
    success: bool = True,
) -> WorkflowAnalysisResult:
    """Build a successful two-step analysis unless overridden.

    Defaults: Submit -> Manager Review, with existing statuses
    Pending (1), Approve (3), Reject (7) and no new statuses.
    """
    if steps is None:
        steps = [
            WorkflowStep(order=1, title="Submit", description="Employee submits request"),
            WorkflowStep(order=2, title="Manager Review", description="Manager reviews request"),
        ]
    if transitions is None:
        transitions = [
            WorkflowTransition(source_step=None, trigger_status="Pending", destination_step="Submit"),
            WorkflowTransition(
                source_step="Submit", trigger_status="Approve", destination_step="Manager Review"
            ),
            WorkflowTransition(
                source_step="Manager Review",
                trigger_status="Reject",
                destination_step="Submit",
                is_progressive=False,
            ),
            WorkflowTransition(
                source_step="Manager Review", trigger_status="Approve", destination_step=None
            ),
        ]
    if existing is None:
        existing = [
            WorkflowStatus(name="Pending", is_existing=True, existing_id=1),
            WorkflowStatus(name="Approve", is_existing=True, existing_id=3),
            WorkflowStatus(name="Reject", is_existing=True, existing_id=7),
        ]
    return WorkflowAnalysisResult(
        success=success,
        error_message=None if success else "LLM unavailable",
        workflow_name=workflow_name,
        steps=steps,
        transitions=transitions,
        required_statuses=required or [],
        existing_statuses=existing,
    )


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Return a ``Settings`` instance pointing at a temporary schema file."""
    schema_file = tmp_path / "schema.sql"
    schema_file.write_text("-- TEST PAWS SCHEMA\nCREATE TABLE t (id int);\n", encoding="utf-8")
    return Settings(
        use_schema_file=True,
        workflow_schema_file=schema_file,
        analysis_cache_ttl_seconds=0,
        min_expected_inserts=3,
    )


@pytest.fixture
def analysis() -> WorkflowAnalysisResult:
    """Return the default two-step analysis."""
    return make_analysis()


@pytest.fixture
def spy_reporter() -> SpyReporter:
    """Return a fresh ``SpyReporter`` instance."""
    return SpyReporter()


@pytest.fixture
def noop_reporter() -> NoOpReporter:
    """Return a ``NoOpReporter`` from the protocols module."""
    return NoOpReporter()


@pytest.fixture(autouse=True)
def _reset_analysis_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without a process-wide analysis cache."""
    monkeypatch.setattr("entities.workflow_analyzer.cache._cache", None)
