"""Waiting time calculation for queue entries.

``get_waiting_time`` only measures; ``wait_urgency`` is the presentation bucket
callers may layer on top of it.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from clinicqueue.core.utils.datetime_utils import ensure_utc, get_current_timestamp
from clinicqueue.domain.enums.workflow import WaitUrgency


@dataclass(frozen=True)
class WaitingTime:
    """Elapsed wait in whole minutes plus a human readable form."""

    minutes: int
    formatted: str


def get_waiting_time(
    arrival_time: Union[datetime, str],
    now: Optional[datetime] = None,
) -> WaitingTime:
    """Compute how long a patient has been waiting.

    Args:
        arrival_time: Arrival timestamp (datetime or ISO-8601 string; naive means UTC)
        now: Reference time, defaults to the current UTC time

    Returns:
        ``WaitingTime`` with floored minutes, e.g. ``45 min`` or ``1h 5min``.
        Arrival times in the future (clock skew) count as zero.
    """
    if isinstance(arrival_time, str):
        arrival_time = datetime.fromisoformat(arrival_time.replace("Z", "+00:00"))
    reference = ensure_utc(now) if now is not None else get_current_timestamp()
    elapsed_seconds = (reference - ensure_utc(arrival_time)).total_seconds()
    minutes = max(0, int(elapsed_seconds // 60))

    if minutes < 60:
        return WaitingTime(minutes=minutes, formatted=f"{minutes} min")

    hours, remaining = divmod(minutes, 60)
    return WaitingTime(minutes=minutes, formatted=f"{hours}h {remaining}min")


def wait_urgency(
    minutes: int,
    medium_after: int = 30,
    high_after: int = 60,
) -> WaitUrgency:
    """Bucket a wait: ``<= medium_after`` low, ``<= high_after`` medium, above that high."""
    if minutes > high_after:
        return WaitUrgency.HIGH
    if minutes > medium_after:
        return WaitUrgency.MEDIUM
    return WaitUrgency.LOW
