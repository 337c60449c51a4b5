# cloudbox_app/models/__init__.py
# -*- coding: utf-8 -*-
from .user import User
from .folder import Folder, STATUS_ACTIVE, STATUS_TRASHED, STATUS_DELETED
from .file import UserFile
from .share import Share, PERMISSIONS
from .audit import AuditLog


__all__ = [
    "User",
    "Folder",
    "UserFile",
    "Share",
    "AuditLog",
    "PERMISSIONS",
    "STATUS_ACTIVE",
    "STATUS_TRASHED",
    "STATUS_DELETED",
]
