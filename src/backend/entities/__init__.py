"""
Entities package.

Each subdirectory is one stage of turning a workflow description
into a seed script:
- workflow_analyzer/: Extracts steps, statuses and transitions via an LLM
- sql_compiler/: Compiles an analysis into PAWS INSERT statements
- output_validator/: Lints the generated script
- workflow/: Pipeline combining the stages

Shared helpers live in shared/.
"""
