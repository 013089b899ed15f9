"""Protocol interfaces for I/O boundaries.

These protocols enable dependency injection for testability.
Production implementations wrap an LLM client; test fakes
return canned data with zero network or filesystem access.
"""

from __future__ import annotations

import logging
import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class CompletionClient(Protocol):
    """Sends a single prompt to a language model and returns its text reply.

    The reply is untrusted: it may be empty, wrapped in markdown, or
    not JSON at all.
    """

    async def complete(self, prompt: str) -> str:
        """Run a prompt.

        Args:
            prompt: Fully rendered prompt text.

        Returns:
            The raw text of the model's reply.
        """
        ...


@runtime_checkable
class ProgressReporter(Protocol):
    """Reports step-level progress for UI updates."""

    def step_start(self, step: str) -> None:
        """Signal that a named step has started.

        Args:
            step: Human-readable step label.
        """
        ...

    def step_end(self, step: str) -> None:
        """Signal that a named step has completed.

        Args:
            step: Human-readable step label (must match a prior start).
        """
        ...


# ---------------------------------------------------------------------------
# Concrete implementations
# ---------------------------------------------------------------------------


class NoOpReporter:
    """ProgressReporter that silently discards all events.

    Useful in tests and batch contexts where no UI exists.
    """

    def step_start(self, step: str) -> None:
        """No-op."""

    def step_end(self, step: str) -> None:
        """No-op."""


class LoggingReporter:
    """ProgressReporter that writes step events to a logger.

    Used by the command-line entry point.

    Args:
        logger: Logger to write to.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger
        self._start_times: dict[str, float] = {}

    def step_start(self, step: str) -> None:
        """Record the start time and log the step.

        Args:
            step: Human-readable step label.
        """
        self._start_times[step] = time.perf_counter()
        self._logger.info("%s...", step)

    def step_end(self, step: str) -> None:
        """Log the step with its duration.

        Args:
            step: Human-readable step label (must match a prior start).
        """
        start_time = self._start_times.pop(step, None)
        if start_time is None:
            self._logger.info("%s done", step)
            return
        self._logger.info("%s done in %.1fms", step, (time.perf_counter() - start_time) * 1000)
