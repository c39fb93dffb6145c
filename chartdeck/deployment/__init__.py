"""Deployment package for Helm-managed releases.

The package is organized into subpackages for modularity:
- shell_commands: Abstractions for helm, docker and registry CLI execution
- chart_operator: Release naming, values rendering, indexing and installation
"""

from .chart_operator import ChartDeckError, ChartWorkflow

__all__ = ["ChartWorkflow", "ChartDeckError"]
