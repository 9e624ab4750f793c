"""Report rendering: rich terminal output and JSON."""

from .console import format_json, phase_icon, render_json, render_report

__all__ = ["format_json", "phase_icon", "render_json", "render_report"]
