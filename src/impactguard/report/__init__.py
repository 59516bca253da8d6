"""Report rendering."""

from impactguard.report.renderer import render_report

__all__ = ["render_report"]
