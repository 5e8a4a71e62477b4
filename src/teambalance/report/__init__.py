"""Report output helpers."""

from .export import (
    build_run_report,
    export_assignments_to_csv,
    render_report,
)

__all__ = [
    "build_run_report",
    "export_assignments_to_csv",
    "render_report",
]
