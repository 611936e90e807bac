"""
reports package

Human-readable summaries of discovery results.
"""

from printer_discovery.reports.summary import (
    format_attempts,
    format_discovered,
    format_exhaustion,
    format_probe_results,
)

__all__ = [
    "format_attempts",
    "format_discovered",
    "format_exhaustion",
    "format_probe_results",
]
