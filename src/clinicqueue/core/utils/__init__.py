"""
Shared utilities.
"""

from .datetime_utils import ensure_utc, format_timestamp, get_current_timestamp

__all__ = [
    "ensure_utc",
    "format_timestamp",
    "get_current_timestamp",
]
