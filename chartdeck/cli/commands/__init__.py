"""CLI command modules.

Command Groups:
- chart: Release output, apply, update and delete
"""

from .chart import chart_app

__all__ = ["chart_app"]
