"""Output Validator package for linting generated seed scripts."""

from .validator import validate_output

__all__ = ["validate_output"]
