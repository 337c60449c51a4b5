# cloudbox_app/services/quota.py
# -*- coding: utf-8 -*-
"""
Per-user storage accounting.

``users.storage_used`` is only ever changed with single UPDATE statements
(``storage_used = storage_used + :delta``) so concurrent uploads and purges
for the same user never lose an update. Callers own the commit.
"""
from __future__ import annotations
from datetime import datetime

from sqlalchemy import case, select, update

from ..errors import NotFoundError, StorageExceededError
from ..extensions import db
from ..models import User


def _require_user(user_id: int) -> None:
    exists = db.session.execute(select(User.id).where(User.id == user_id)).scalar_one_or_none()
    if exists is None:
        raise NotFoundError(f"User with ID {user_id} not found")


def adjust(user_id: int, delta: int) -> int:
    """Adds ``delta`` (may be negative) to storage_used, clamped at zero. Returns the new value."""
    new_value = User.storage_used + delta
    result = db.session.execute(
        update(User)
        .where(User.id == user_id)
        .values(storage_used=case((new_value < 0, 0), else_=new_value), updated_at=datetime.utcnow())
        .execution_options(synchronize_session="fetch")
    )
    if not result.rowcount:
        raise NotFoundError(f"User with ID {user_id} not found")
    return get_stats(user_id)["used"]


def charge(user_id: int, size: int) -> int:
    """
    Reserves ``size`` bytes, failing with StorageExceededError when the user
    would go over storage_limit. Check and increment are one statement.
    """
    result = db.session.execute(
        update(User)
        .where(User.id == user_id, User.storage_used + size <= User.storage_limit)
        .values(storage_used=User.storage_used + size, updated_at=datetime.utcnow())
        .execution_options(synchronize_session="fetch")
    )
    if not result.rowcount:
        _require_user(user_id)
        stats = get_stats(user_id)
        raise StorageExceededError(
            "Storage limit exceeded",
            details={"used": stats["used"], "total": stats["total"], "requested": size},
        )
    return get_stats(user_id)["used"]


def release(user_id: int, size: int) -> int:
    return adjust(user_id, -abs(size))


def get_stats(user_id: int) -> dict:
    row = db.session.execute(
        select(User.storage_used, User.storage_limit).where(User.id == user_id)
    ).one_or_none()
    if row is None:
        raise NotFoundError(f"User with ID {user_id} not found")
    return {"used": int(row.storage_used or 0), "total": int(row.storage_limit or 0)}
