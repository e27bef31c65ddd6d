"""Best-effort employee activity log"""

import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from shopdesk.domain.models import ActivityEntry
from shopdesk.infrastructure.database.repositories import ActivityLogRepository
from shopdesk.infrastructure.observability.metrics import activity_log_failures_counter

logger = logging.getLogger(__name__)

SALE_RECORDED = "sale_recorded"


def log_activity(db: Session, entry: ActivityEntry) -> bool:
    """
    Write one activity entry in its own commit.

    Failures are logged and dropped; they never undo the operation that
    triggered the entry. Returns whether the entry was stored.
    """
    try:
        ActivityLogRepository(db).create_entry(entry)
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        activity_log_failures_counter.inc()
        logger.warning(
            f"Failed to log activity: {e}",
            extra={"employee_id": str(entry.employee_id), "action": entry.action},
        )
        return False
