"""SQL Compiler package for turning workflow analyses into seed scripts."""

from .compiler import compile_workflow
from .status_resolver import WELL_KNOWN_STATUS_IDS, resolve_trigger_status

__all__ = ["WELL_KNOWN_STATUS_IDS", "compile_workflow", "resolve_trigger_status"]
