"""
Audit logging for store-scoped business events.

Emits one JSON line per event on the "audit" logger so it can be shipped
separately from application logs. Never logs tokens.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

audit_logger = logging.getLogger("audit")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuditLog:
    """Central audit logging for sales, imports and denied access."""

    @staticmethod
    def log_action(
        action: str,  # "create", "import", "update"
        resource_type: str,  # "sale", "inventory", "store"
        resource_id: str,
        user_id: str,
        changes: Optional[Dict[str, Any]] = None,
    ):
        """
        Usage:
            AuditLog.log_action("create", "sale", sale.id, user_id, changes={"bill_number": "ABCD-..."})
        """
        log_entry = {
            "timestamp": _now(),
            "event_type": f"{resource_type}.{action}",
            "user_id": user_id,
            "resource_id": resource_id,
        }
        if changes:
            log_entry["changes"] = changes

        audit_logger.info(json.dumps(log_entry, default=str))

    @staticmethod
    def log_access_denied(
        action: str,
        resource_type: str,
        resource_id: str,
        user_id: str,
        reason: str,
    ):
        """
        Log denied access attempts: a caller naming a store they don't own.

        Usage:
            AuditLog.log_access_denied("sell", "store", store_id, user_id, "Not store owner")
        """
        log_entry = {
            "timestamp": _now(),
            "event_severity": "WARNING",
            "event_type": "access_denied",
            "action": action,
            "resource_type": resource_type,
            "resource_id": resource_id,
            "user_id": user_id,
            "reason": reason,
        }

        audit_logger.warning(json.dumps(log_entry, default=str))
