"""
Export functionality for Unctico safety reports.
"""

from .json_export import alert_summary, export_json, red_flag_summary
from .markdown import export_markdown

__all__ = [
    "alert_summary",
    "export_json",
    "red_flag_summary",
    "export_markdown",
]
