"""Report output: JSON summary and PDF rendering."""

from .report import rasterize_strokes, render_report_pdf
from .summary import ReportError, build_report, format_answer, write_report_json

__all__ = [
    "rasterize_strokes",
    "render_report_pdf",
    "ReportError",
    "build_report",
    "format_answer",
    "write_report_json",
]
