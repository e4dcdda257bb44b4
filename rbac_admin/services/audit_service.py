"""Audit service — append-only audit trail for role mutations."""

import json
from typing import Optional, Any
from sqlalchemy.orm import Session

from rbac_admin.core.security import Identity
from rbac_admin.models.audit_log import AuditLog


class AuditService:
    """Records immutable audit log entries for system events."""

    @staticmethod
    def log(
        db: Session,
        actor: Optional[Identity],
        action: str,
        resource_type: str,
        resource_id: Optional[Any] = None,
        old_value: Optional[Any] = None,
        new_value: Optional[Any] = None,
    ) -> AuditLog:
        """Stage a single audit log record.

        Args:
            action: e.g. "role.created", "role.deleted"
            resource_type: role

        The entry is only added to the session; the caller commits it together
        with the mutation it describes, so neither is persisted without the other.
        """
        entry = AuditLog(
            actor_id=actor.user_id if actor else None,
            actor_email=actor.email if actor else None,
            action=action,
            resource_type=resource_type,
            resource_id=str(resource_id) if resource_id is not None else None,
            old_value_json=json.dumps(old_value, default=str) if old_value else None,
            new_value_json=json.dumps(new_value, default=str) if new_value else None,
        )
        db.add(entry)
        return entry

    @staticmethod
    def query_logs(
        db: Session,
        actor_id: Optional[int] = None,
        action: Optional[str] = None,
        resource_type: Optional[str] = None,
        resource_id: Optional[Any] = None,
    ):
        """Query audit logs with filters, newest first."""
        query = db.query(AuditLog)

        if actor_id:
            query = query.filter(AuditLog.actor_id == actor_id)
        if action:
            query = query.filter(AuditLog.action == action)
        if resource_type:
            query = query.filter(AuditLog.resource_type == resource_type)
        if resource_id is not None:
            query = query.filter(AuditLog.resource_id == str(resource_id))

        return query.order_by(AuditLog.id.desc()).all()


audit_service = AuditService()
