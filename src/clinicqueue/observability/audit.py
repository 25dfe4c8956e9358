"""Audit-trail gap reporting.

A gap means the queue status changed but its journey step was not recorded.
Gaps are written to their own logger so operators can alert on them apart
from regular audit traffic.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from ..core.exceptions import AuditWriteError
from ..core.structured_logger import AUDIT_GAP_LOGGER
from .metrics import record_audit_write_failure


logger = logging.getLogger(AUDIT_GAP_LOGGER)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def report_audit_gap(error: AuditWriteError, actor_id: Optional[str] = None) -> None:
    record = {
        "ts": _now_iso(),
        "event": "journey_step_missing",
        "entry_id": error.entry_id,
        "step_type": error.step_type,
        "actor_id": actor_id,
        "cause": repr(error.cause),
    }
    logger.error(
        "AUDIT_GAP %s",
        json.dumps(record, ensure_ascii=False),
        exc_info=error.cause,
    )
    record_audit_write_failure(error.step_type)
