# cloudbox_app/models/audit.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from ..extensions import db

class AuditLog(db.Model):
    __tablename__ = "audit_logs"
    id = db.Column(db.Integer, primary_key=True)
    # no FK: entries outlive the rows they describe
    user_id = db.Column(db.Integer, index=True, nullable=False)
    action = db.Column(db.String(80), nullable=False)   # upload, trash, restore, purge, folder_delete, share, ...
    ref = db.Column(db.String(120))                     # e.g. file:<id> / folder:<id> / share:<id>
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
