"""Workflow Analyzer package for extracting workflow structure via an LLM."""

from .analyzer import analyze_workflow
from .cache import AnalysisCache, get_analysis_cache

__all__ = ["AnalysisCache", "analyze_workflow", "get_analysis_cache"]
