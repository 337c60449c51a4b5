# cloudbox_app/models/file.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from ..extensions import db
from .folder import STATUS_ACTIVE

class UserFile(db.Model):
    __tablename__ = "files"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)            # display name, user-editable
    original_name = db.Column(db.String(255), nullable=False)   # as uploaded
    type = db.Column(db.String(255), nullable=False)            # MIME
    size = db.Column(db.BigInteger, nullable=False)             # fixed at creation
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True, nullable=False)
    folder_id = db.Column(db.Integer, db.ForeignKey("folders.id"), index=True, nullable=True)  # null = root
    path = db.Column(db.String(512), nullable=False)            # blob store key
    status = db.Column(db.String(16), nullable=False, default=STATUS_ACTIVE, index=True)
    favorite = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = db.Column(db.DateTime, nullable=True)

    __table_args__ = (
        db.CheckConstraint("size > 0", name="ck_files_size_positive"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "originalName": self.original_name,
            "type": self.type,
            "size": self.size,
            "userId": self.user_id,
            "folderId": self.folder_id,
            "path": self.path,
            "status": self.status,
            "favorite": bool(self.favorite),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            "deletedAt": self.deleted_at.isoformat() if self.deleted_at else None,
        }
