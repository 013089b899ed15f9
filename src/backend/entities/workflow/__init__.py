"""Workflow package: the description-to-SQL pipeline."""

from .pipeline import generate_workflow_sql

__all__ = ["generate_workflow_sql"]
