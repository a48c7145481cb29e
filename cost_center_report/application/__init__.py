"""Application services."""

from .reports import (
    ReportService,
    close_report_service,
    configure_report_service,
    get_report_service,
    reset_report_state,
)

__all__ = [
    "ReportService",
    "close_report_service",
    "configure_report_service",
    "get_report_service",
    "reset_report_state",
]
