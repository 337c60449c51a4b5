# cloudbox_app/services/sharing.py
# -*- coding: utf-8 -*-
"""
Share links: an unguessable token granting scoped access to one file or one
folder. The token is checked on every read (expiry first, then password).
"""
from __future__ import annotations
import uuid
from datetime import datetime
from typing import Optional

from flask import current_app

from ..errors import (
    ForbiddenError, GoneError, NotFoundError, PasswordRequiredError,
    UnauthorizedError, ValidationFailedError,
)
from ..extensions import db
from ..models import Folder, Share, UserFile, STATUS_ACTIVE
from . import audit
from .contents import file_payload, list_contents
from .lifecycle import transaction
from .repository import repo
from .validation import check_permission

TARGET_KINDS = ("file", "folder")


def _new_token() -> str:
    return str(uuid.uuid4())


def issue(owner_id: int, kind: str, target_id: int, permission: str = "view",
          password: Optional[str] = None, expires_at: Optional[datetime] = None) -> Share:
    if kind not in TARGET_KINDS:
        raise ValidationFailedError(f"Invalid share target type: {kind}")
    permission = check_permission(permission)
    if expires_at is not None and expires_at <= datetime.utcnow():
        raise ValidationFailedError("Expiration date must be in the future")

    with transaction("create share"):
        model = UserFile if kind == "file" else Folder
        target = repo.get(model, target_id)
        if target is None or target.status != STATUS_ACTIVE:
            raise NotFoundError(f"{kind.capitalize()} not found", details={"id": target_id})
        if target.user_id != owner_id:
            raise ForbiddenError(f"You don't have access to this {kind}", details={"id": target_id})

        share = Share(
            user_id=owner_id,
            file_id=target.id if kind == "file" else None,
            folder_id=target.id if kind == "folder" else None,
            token=_new_token(),
            permission=permission,
            expires_at=expires_at,
        )
        share.set_password(password)
        db.session.add(share)
        db.session.flush()
        audit.record(owner_id, "share", f"share:{share.id}", f"{kind}:{target.id}")
    return share


def check_access(token: str, password: Optional[str] = None) -> Share:
    """Token -> Share, enforcing expiry and the password gate."""
    share = repo.find_share_by_token(token)
    if share is None:
        raise NotFoundError("Share not found or has expired")
    if share.is_expired():
        raise GoneError("Share link has expired")
    if share.has_password:
        if not password:
            raise PasswordRequiredError()
        if not share.check_password(password):
            raise UnauthorizedError("Invalid password")
    return share


def resolve(token: str, password: Optional[str] = None) -> dict:
    """Returns ``{"share", "item"}`` where item is the file (with URL) or folder contents."""
    share = check_access(token, password)
    if share.file_id is not None:
        f = repo.get(UserFile, share.file_id)
        if f is None or f.status != STATUS_ACTIVE:
            raise NotFoundError("Shared file not found")
        item = {"type": "file", **file_payload(f, token=token, password=password)}
    else:
        folder = repo.get(Folder, share.folder_id)
        if folder is None or folder.status != STATUS_ACTIVE:
            raise NotFoundError("Shared folder not found")
        contents = list_contents(share.user_id, share.folder_id, token=token, password=password)
        item = {"type": "folder", "folder": folder.to_dict(), **contents}
    return {"share": share.to_dict(), "item": item}


def authorize_file_within_share(share: Share, file_id: int) -> bool:
    """
    A file share covers that file only; a folder share covers the files
    directly inside the folder. Nothing else is reachable through the token.
    """
    if share.file_id is not None:
        return share.file_id == file_id
    f = repo.get(UserFile, file_id)
    if f is None or f.status != STATUS_ACTIVE:
        return False
    return share.folder_id is not None and f.folder_id == share.folder_id and f.user_id == share.user_id


def revoke(owner_id: int, share_id: int) -> None:
    with transaction("revoke share"):
        share = repo.get(Share, share_id)
        if share is None:
            raise NotFoundError("Share not found")
        if share.user_id != owner_id:
            raise ForbiddenError("You don't have access to this share")
        repo.delete(Share, share_id)
        audit.record(owner_id, "unshare", f"share:{share_id}", None)


def list_shares(owner_id: int) -> list[Share]:
    return Share.query.filter_by(user_id=owner_id).order_by(Share.created_at.desc()).all()


def purge_expired_shares(now: Optional[datetime] = None) -> int:
    with transaction("purge expired shares"):
        removed = repo.delete_expired_shares(now or datetime.utcnow())
    if removed:
        current_app.logger.info("Expired shares removed: %d", removed)
    return removed
