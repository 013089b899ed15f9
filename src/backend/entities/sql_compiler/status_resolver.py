"""Trigger status resolution.

Maps a transition's trigger status name to either a literal
ActivityStatusID or a lookup that runs when the script executes.
Stateless: safe to call repeatedly for the same analysis.
"""

from __future__ import annotations

import logging
from types import MappingProxyType

from models import KnownStatusId, StatusLookup, StatusReference, WorkflowAnalysisResult

logger = logging.getLogger(__name__)

# Long-standing PAWS status ids, keyed by lowercase title.
WELL_KNOWN_STATUS_IDS: MappingProxyType[str, int] = MappingProxyType({
    "pending": 1,
    "submit for approval": 2,
    "approve": 3,
    "reject": 7,
    "submit draft": 17,
    "submit for review": 18,
    "review and close": 19,
})


def resolve_trigger_status(
    trigger_status: str,
    analysis: WorkflowAnalysisResult,
    warnings: list[str],
) -> StatusReference:
    """Resolve a trigger status name to a status reference.

    Names are compared case-insensitively with surrounding whitespace
    ignored, at every step. Resolution order:

    1. Existing statuses: the literal ``existing_id``.
    2. Required statuses: a lookup by title, since the row is inserted
       by the same script and its id is only known at execution time.
    3. ``WELL_KNOWN_STATUS_IDS``: a best-effort literal id.
    4. Otherwise a lookup against the whole status table.

    Every resolution except the first appends a warning.

    Args:
        trigger_status: Name of the status that fires the transition.
        analysis: The analysis holding existing and required statuses.
        warnings: Caller-owned list that receives warning strings.

    Returns:
        ``KnownStatusId`` or ``StatusLookup``.
    """
    for status in analysis.existing_statuses:
        if status.matches(trigger_status) and status.existing_id is not None:
            return KnownStatusId(status_id=status.existing_id, name=status.name)

    for status in analysis.required_statuses:
        if status.matches(trigger_status):
            warnings.append(
                f"Trigger status '{trigger_status}' is new - its id is looked up "
                f"by title after the status row is inserted"
            )
            return StatusLookup(name=status.name)

    well_known_id = WELL_KNOWN_STATUS_IDS.get(trigger_status.strip().casefold())
    if well_known_id is not None:
        warnings.append(
            f"Trigger status '{trigger_status}' is not in the analyzed status sets - "
            f"using well-known id {well_known_id}"
        )
        return KnownStatusId(status_id=well_known_id, name=trigger_status)

    logger.debug("No mapping for trigger status %r; falling back to lookup", trigger_status)
    warnings.append(
        f"Could not map trigger status '{trigger_status}' to an existing ID - using lookup"
    )
    return StatusLookup(name=trigger_status.strip())
