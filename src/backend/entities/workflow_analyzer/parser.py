"""Parsing of untrusted LLM replies into workflow models.

The model is asked for JSON but may wrap it in markdown, prepend
prose, or return something else entirely. Parsers here never raise
on bad input: they drop malformed entries and log what they skipped.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from models import WorkflowStatus, WorkflowStep, WorkflowTransition
from pydantic import ValidationError

logger = logging.getLogger(__name__)

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def parse_json_payload(response_text: str | None) -> dict[str, Any]:
    """Extract a JSON object from an LLM reply.

    Attempts direct JSON parsing, then markdown code-fence extraction,
    and finally decodes the first object starting at a ``{``.

    Args:
        response_text: The raw text response from the LLM.

    Returns:
        The parsed object, or an empty dict if none could be found.
    """
    text = (response_text or "").strip()
    if not text:
        return {}

    # Direct JSON parse
    try:
        parsed = json.loads(text)
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError:
        pass

    # Extract from markdown code fence
    for block in _FENCE_PATTERN.findall(text):
        try:
            parsed = json.loads(block.strip())
            if isinstance(parsed, dict):
                return parsed
        except json.JSONDecodeError:
            continue

    # First decodable object embedded in prose
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            parsed, _ = decoder.raw_decode(text, start)
            if isinstance(parsed, dict):
                return parsed
        except json.JSONDecodeError:
            pass
        start = text.find("{", start + 1)

    logger.warning("Failed to parse LLM response: %s", text[:200])
    return {}


def _entries(payload: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = payload.get(key)
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, dict)]


def _optional_text(value: Any) -> str | None:  # noqa: ANN401
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_bool(value: Any, default: bool) -> bool:  # noqa: ANN401
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes"}
    if value is None:
        return default
    return bool(value)


def parse_steps(payload: dict[str, Any]) -> list[WorkflowStep]:
    """Build steps from ``{"steps": [...]}``, sorted by order.

    Entries without a title or with a non-numeric order are skipped.
    """
    steps: list[WorkflowStep] = []
    for entry in _entries(payload, "steps"):
        title = _optional_text(entry.get("title"))
        if title is None:
            logger.warning("Skipping step without a title: %s", entry)
            continue
        outcomes = entry.get("possibleOutcomes") or []
        try:
            steps.append(
                WorkflowStep(
                    order=int(entry.get("order", 0)),
                    title=title,
                    description=str(entry.get("description") or ""),
                    possible_outcomes=[str(o) for o in outcomes if o] if isinstance(outcomes, list) else [],
                )
            )
        except (TypeError, ValueError, ValidationError):
            logger.warning("Skipping malformed step: %s", entry)
    return sorted(steps, key=lambda step: step.order)


def parse_statuses(
    payload: dict[str, Any],
) -> tuple[list[WorkflowStatus], list[WorkflowStatus]]:
    """Build (required, existing) statuses from ``{"requiredStatuses": [...]}``.

    A status that claims to exist but carries no id is treated as new,
    so the generated script inserts it rather than guessing an id.
    Duplicate names (case-insensitive) keep the first occurrence.
    """
    required: list[WorkflowStatus] = []
    existing: list[WorkflowStatus] = []
    seen: set[str] = set()

    for entry in _entries(payload, "requiredStatuses"):
        name = _optional_text(entry.get("name"))
        if name is None or name.casefold() in seen:
            continue
        seen.add(name.casefold())

        raw_id = entry.get("existingId")
        try:
            existing_id = int(raw_id) if raw_id is not None else None
        except (TypeError, ValueError):
            existing_id = None

        is_existing = _as_bool(entry.get("isExisting"), default=False) and existing_id is not None
        status = WorkflowStatus(
            name=name,
            description=str(entry.get("description") or ""),
            is_existing=is_existing,
            existing_id=existing_id if is_existing else None,
        )
        (existing if is_existing else required).append(status)

    return required, existing


def parse_transitions(payload: dict[str, Any]) -> list[WorkflowTransition]:
    """Build transitions from ``{"transitions": [...]}``.

    Blank step names mean START/END; entries without a trigger
    status are skipped.
    """
    transitions: list[WorkflowTransition] = []
    for entry in _entries(payload, "transitions"):
        trigger = _optional_text(entry.get("triggerStatus"))
        if trigger is None:
            logger.warning("Skipping transition without a trigger status: %s", entry)
            continue
        transitions.append(
            WorkflowTransition(
                source_step=_optional_text(entry.get("sourceStep")),
                trigger_status=trigger,
                destination_step=_optional_text(entry.get("destinationStep")),
                is_progressive=_as_bool(entry.get("isProgressive"), default=True),
            )
        )
    return transitions
