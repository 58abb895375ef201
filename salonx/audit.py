"""Platform audit trail (admin_audit_logs)"""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from .models import SYSTEM_ADMIN_ID, AdminAuditLog

logger = logging.getLogger(__name__)


def log_admin_action(
    db: Session,
    action: str,
    target_type: Optional[str] = None,
    target_id: Optional[str] = None,
    metadata: Optional[dict[str, Any]] = None,
    admin_email: Optional[str] = None,
    commit: bool = True,
) -> AdminAuditLog:
    """Record an audit row; commit=False leaves it in the caller's transaction"""
    details = dict(metadata or {})
    if admin_email:
        details["admin_email"] = admin_email

    entry = AdminAuditLog(
        admin_id=SYSTEM_ADMIN_ID,
        action=action,
        target_type=target_type,
        target_id=target_id,
        details=details,
    )
    db.add(entry)
    if commit:
        db.commit()
    logger.debug(f"📝 Audit {action} {target_type}:{target_id} by {admin_email or 'system'}")
    return entry
