"""Monitoring module for boxstack.

Provides run metrics, report formatting and Telegram notifications.
"""

from .metrics import (
    SearchMetrics,
    export_to_csv,
    export_to_json,
    format_stack_report,
    print_details,
    print_summary,
    residual_rows,
)
from .telegram_notifier import (
    format_error,
    format_search_complete,
    format_search_start,
    send_telegram,
)

__all__ = [
    # Metrics
    "SearchMetrics",
    "export_to_csv",
    "export_to_json",
    "format_stack_report",
    "print_details",
    "print_summary",
    "residual_rows",
    # Telegram
    "send_telegram",
    "format_search_start",
    "format_search_complete",
    "format_error",
]
