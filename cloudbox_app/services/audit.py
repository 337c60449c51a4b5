# cloudbox_app/services/audit.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from ..extensions import db
from ..models import AuditLog

def record(user_id: int, action: str, ref: str | None = None, description: str | None = None) -> AuditLog:
    """Adds an audit row to the current transaction (committed by the caller)."""
    entry = AuditLog(user_id=user_id, action=action, ref=ref, description=description)
    db.session.add(entry)
    return entry

def history(user_id: int, limit: int = 100) -> list[AuditLog]:
    return (AuditLog.query.filter_by(user_id=user_id)
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .limit(limit).all())
