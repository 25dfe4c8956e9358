"""
Waiting time calculation and urgency buckets.
"""

from datetime import datetime, timedelta, timezone

import pytest

from clinicqueue.application.utils.waiting_time import get_waiting_time, wait_urgency
from clinicqueue.domain.enums.workflow import WaitUrgency


NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "elapsed, minutes, formatted",
    [
        (timedelta(0), 0, "0 min"),
        (timedelta(minutes=45), 45, "45 min"),
        (timedelta(minutes=59, seconds=59), 59, "59 min"),
        (timedelta(minutes=60), 60, "1h 0min"),
        (timedelta(minutes=65), 65, "1h 5min"),
        (timedelta(hours=3, minutes=12, seconds=30), 192, "3h 12min"),
    ],
)
def test_waiting_time_format(elapsed, minutes, formatted):
    result = get_waiting_time(NOW - elapsed, now=NOW)
    assert result.minutes == minutes
    assert result.formatted == formatted


def test_future_arrival_counts_as_zero():
    result = get_waiting_time(NOW + timedelta(minutes=5), now=NOW)
    assert result.minutes == 0
    assert result.formatted == "0 min"


def test_accepts_iso_string_and_naive_datetimes():
    assert get_waiting_time("2025-03-10T11:15:00Z", now=NOW).minutes == 45
    assert get_waiting_time(datetime(2025, 3, 10, 11, 15), now=NOW).minutes == 45


def test_defaults_to_current_time():
    arrival = datetime.now(timezone.utc) - timedelta(minutes=10)
    assert get_waiting_time(arrival).minutes in (9, 10)


@pytest.mark.parametrize(
    "minutes, expected",
    [
        (0, WaitUrgency.LOW),
        (30, WaitUrgency.LOW),
        (31, WaitUrgency.MEDIUM),
        (60, WaitUrgency.MEDIUM),
        (61, WaitUrgency.HIGH),
    ],
)
def test_wait_urgency_buckets(minutes, expected):
    assert wait_urgency(minutes) is expected


def test_wait_urgency_custom_thresholds():
    assert wait_urgency(20, medium_after=10, high_after=15) is WaitUrgency.HIGH
