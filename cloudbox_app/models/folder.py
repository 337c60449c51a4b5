# cloudbox_app/models/folder.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from ..extensions import db

STATUS_ACTIVE = "active"
STATUS_TRASHED = "trashed"
STATUS_DELETED = "deleted"

class Folder(db.Model):
    __tablename__ = "folders"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True, nullable=False)
    parent_id = db.Column(db.Integer, db.ForeignKey("folders.id"), index=True, nullable=True)  # null = root
    status = db.Column(db.String(16), nullable=False, default=STATUS_ACTIVE, index=True)
    path = db.Column(db.Text, nullable=False, default="/")  # denormalized, display only
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "userId": self.user_id,
            "parentId": self.parent_id,
            "status": self.status,
            "path": self.path,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
