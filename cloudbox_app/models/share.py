# cloudbox_app/models/share.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from ..extensions import db, bcrypt

PERMISSIONS = ("view", "edit", "full")

class Share(db.Model):
    __tablename__ = "shares"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True, nullable=False)
    # exactly one of file_id / folder_id is set
    file_id = db.Column(db.Integer, db.ForeignKey("files.id"), index=True, nullable=True)
    folder_id = db.Column(db.Integer, db.ForeignKey("folders.id"), index=True, nullable=True)
    token = db.Column(db.String(64), unique=True, nullable=False, index=True)
    permission = db.Column(db.String(8), nullable=False, default="view")
    password_hash = db.Column(db.String(255), nullable=True)
    expires_at = db.Column(db.DateTime, nullable=True, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint(
            "(file_id IS NULL) <> (folder_id IS NULL)",
            name="ck_shares_single_target",
        ),
    )

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    def set_password(self, raw: str | None) -> None:
        self.password_hash = bcrypt.generate_password_hash(raw).decode("utf-8") if raw else None

    def check_password(self, raw: str) -> bool:
        return bool(self.password_hash) and bcrypt.check_password_hash(self.password_hash, raw)

    def is_expired(self, now: datetime | None = None) -> bool:
        if not self.expires_at:
            return False
        return self.expires_at < (now or datetime.utcnow())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "fileId": self.file_id,
            "folderId": self.folder_id,
            "token": self.token,
            "permission": self.permission,
            "hasPassword": self.has_password,
            "expiresAt": self.expires_at.isoformat() if self.expires_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
