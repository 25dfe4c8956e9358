#!/usr/bin/env python3
"""
Print the live queue of a clinic: entries by priority and arrival, waiting
times, urgency, per-status counts and the dashboard counters.

Usage:
    python scripts/queue_stats.py --structure clinic-1
    python scripts/queue_stats.py --structure clinic-1 --status waiting --status called
"""

import argparse
import asyncio
import sys
from collections import Counter
from pathlib import Path

# Bootstrap: Add src directory to Python path for src-layout convenience
_script_dir = Path(__file__).resolve().parent
_src_dir_str = str(_script_dir.parent / "src")
if _src_dir_str not in sys.path:
    sys.path.insert(0, _src_dir_str)

from clinicqueue.adapters.db.mongo.database import init_database
from clinicqueue.adapters.db.mongo.repositories.queue_entry_repository import (
    MongoQueueEntryRepository,
)
from clinicqueue.application.use_cases.get_clinic_queue import GetClinicQueueUseCase
from clinicqueue.core.config import get_settings
from clinicqueue.domain.enums.workflow import QueueStatus

ACTIVE_STATUSES = [
    QueueStatus.WAITING,
    QueueStatus.CALLED,
    QueueStatus.IN_CONSULTATION,
    QueueStatus.AWAITING_EXAM,
]

URGENCY_ICONS = {"low": "🟢", "medium": "🟠", "high": "🔴"}


async def main(structure_id: str, statuses, limit: int) -> int:
    settings = get_settings()
    print("=" * 70)
    print(f"Queue of {structure_id} ({settings.database.db_name})")
    print("=" * 70)

    client = await init_database(settings.database)
    try:
        view = await GetClinicQueueUseCase(
            MongoQueueEntryRepository(), settings.queue
        ).execute(structure_id, statuses=statuses, limit=limit)
    finally:
        client.close()

    if not view.items:
        print("  (empty)")
        return 0

    for item in view.items:
        entry = item.entry
        print(
            f"  {URGENCY_ICONS[item.urgency.value]} P{entry.priority} "
            f"{entry.status.value:<16} {item.waiting_time.formatted:>9}  "
            f"patient={entry.patient_id} assigned={entry.assigned_to or '-'}"
        )

    print()
    print("📊 By status:")
    for status, count in sorted(Counter(i.entry.status.value for i in view.items).items()):
        print(f"  {status:<16} {count}")

    stats = view.stats
    print()
    print(f"⏱  Waiting: {stats.waiting}  In consultation: {stats.in_progress}  "
          f"Completed today: {stats.completed_today}  Avg wait: {stats.average_wait_minutes} min")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Print the live queue of a clinic")
    parser.add_argument("--structure", required=True, help="Clinic (structure) ID")
    parser.add_argument(
        "--status",
        action="append",
        choices=[s.value for s in QueueStatus],
        help="Status filter, repeatable (default: active statuses)",
    )
    parser.add_argument("--limit", type=int, default=100)
    args = parser.parse_args()

    selected = [QueueStatus(s) for s in args.status] if args.status else ACTIVE_STATUSES
    sys.exit(asyncio.run(main(args.structure, selected, args.limit)))
