"""Target table names and script constants for the PAWS schema."""

PROCESS_TEMPLATE_TABLE = "[paws].[PAWSProcessTemplate]"
ACTIVITY_TABLE = "[paws].[PAWSActivity]"
STATUS_TABLE = "[paws].[PAWSActivityStatus]"
TRANSITION_TABLE = "[paws].[PAWSActivityTransition]"

# Script-scoped variable holding the new process template's GUID.
PROCESS_ID_VARIABLE = "@processId"
PROCESS_ID_DECLARATION = f"DECLARE {PROCESS_ID_VARIABLE} uniqueidentifier = NEWID();"

# PAWSActivityTransition.TransitionType
TRANSITION_TYPE_FORWARD = 1
TRANSITION_TYPE_BACKWARD = 2

DEFAULT_WORKFLOW_NAME = "Unknown Workflow"
