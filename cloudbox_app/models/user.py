# cloudbox_app/models/user.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from ..extensions import db, bcrypt

class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(120), unique=True, nullable=False, index=True)
    email = db.Column(db.String(180), unique=True, nullable=True, index=True)
    full_name = db.Column(db.String(180))
    password_hash = db.Column(db.String(255), nullable=False)
    # bytes charged for active + trashed files; only the quota service writes it
    storage_used = db.Column(db.BigInteger, nullable=False, default=0)
    storage_limit = db.Column(db.BigInteger, nullable=False, default=2_000_000_000)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint("storage_used >= 0", name="ck_users_storage_used_non_negative"),
        db.CheckConstraint("storage_limit > 0", name="ck_users_storage_limit_positive"),
    )

    def set_password(self, raw: str) -> None:
        self.password_hash = bcrypt.generate_password_hash(raw).decode("utf-8")

    def check_password(self, raw: str) -> bool:
        return bcrypt.check_password_hash(self.password_hash, raw)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "fullName": self.full_name,
            "storageUsed": self.storage_used,
            "storageLimit": self.storage_limit,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
