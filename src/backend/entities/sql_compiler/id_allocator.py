"""Identifier allocation for new rows.

The target tables are shared and usually non-empty, so ids are
emitted as ``current max + offset`` expressions rather than
constants. The status expression recomputes the maximum for every
insert, which is only correct when the script's statements run
sequentially on a single connection with no concurrent writers.
"""

from models import SqlExpression

from .tables import ACTIVITY_TABLE, STATUS_TABLE


def _max_plus(column: str, table: str, offset: int) -> SqlExpression:
    return SqlExpression(f"ISNULL((SELECT MAX({column}) FROM {table}), 0) + {offset}")


def activity_id(step_order: int) -> SqlExpression:
    """Id expression for the activity of the step at ``step_order``.

    Steps are emitted in ascending order before any other activity
    insert of this script, so ``max + order`` stays unique and
    increasing within the workflow.
    """
    if step_order <= 0:
        raise ValueError(f"Step order must be positive, got {step_order}")
    return _max_plus("activityID", ACTIVITY_TABLE, step_order)


def status_id() -> SqlExpression:
    """Id expression for a new status row (``max + 1``)."""
    return _max_plus("ActivityStatusID", STATUS_TABLE, 1)
