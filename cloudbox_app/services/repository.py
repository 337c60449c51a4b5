# cloudbox_app/services/repository.py
# -*- coding: utf-8 -*-
"""
CRUD persistence for users, folders, files and shares.

The repository never commits: services own the transaction boundary.
Lookups return ``None`` / empty lists when nothing matches; ``update`` and
``delete`` on a missing id raise ``NotFoundError``.
"""
from __future__ import annotations
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, func, or_, select

from ..errors import NotFoundError
from ..extensions import db
from ..models import Folder, Share, UserFile, User, STATUS_ACTIVE

# search "type" filter -> MIME rules (prefixes or substrings)
TYPE_FILTERS = {
    "images": ("image/%",),
    "videos": ("video/%",),
    "audio": ("audio/%",),
    "documents": (
        "%pdf%", "%word%", "%excel%", "%powerpoint%",
        "%text%", "%spreadsheet%", "%presentation%",
    ),
}

_LABELS = {User: "User", Folder: "Folder", UserFile: "File", Share: "Share"}


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class Repository:
    @property
    def session(self):
        return db.session

    # ---------------------------------------------------------------- generic
    def get(self, model, entity_id) -> Optional[object]:
        if entity_id is None:
            return None
        return self.session.get(model, entity_id)

    def create(self, model, **fields):
        obj = model(**fields)
        self.session.add(obj)
        self.session.flush()
        return obj

    def update(self, model, entity_id, **fields):
        obj = self.get(model, entity_id)
        if obj is None:
            raise NotFoundError(f"{_LABELS.get(model, model.__name__)} with ID {entity_id} not found")
        for key, value in fields.items():
            setattr(obj, key, value)
        if hasattr(obj, "updated_at"):
            obj.updated_at = datetime.utcnow()
        self.session.flush()
        return obj

    def delete(self, model, entity_id) -> None:
        obj = self.get(model, entity_id)
        if obj is None:
            raise NotFoundError(f"{_LABELS.get(model, model.__name__)} with ID {entity_id} not found")
        self.session.delete(obj)
        self.session.flush()

    # ----------------------------------------------------------------- users
    def find_user_by_username(self, username: str) -> Optional[User]:
        return self.session.execute(
            select(User).where(User.username == username)
        ).scalar_one_or_none()

    # --------------------------------------------------------------- folders
    def find_folders_by_parent(self, user_id: int, parent_id: Optional[int],
                               status: Optional[str] = STATUS_ACTIVE) -> list[Folder]:
        stmt = select(Folder).where(Folder.user_id == user_id)
        stmt = stmt.where(Folder.parent_id.is_(None) if parent_id is None else Folder.parent_id == parent_id)
        if status:
            stmt = stmt.where(Folder.status == status)
        return list(self.session.execute(stmt).scalars())

    def count_children(self, user_id: int, folder_id: int) -> int:
        folders = self.session.execute(
            select(func.count(Folder.id)).where(
                Folder.user_id == user_id, Folder.parent_id == folder_id, Folder.status == STATUS_ACTIVE)
        ).scalar_one()
        files = self.session.execute(
            select(func.count(UserFile.id)).where(
                UserFile.user_id == user_id, UserFile.folder_id == folder_id, UserFile.status == STATUS_ACTIVE)
        ).scalar_one()
        return folders + files

    # ----------------------------------------------------------------- files
    def find_files_by_folder(self, user_id: int, folder_id: Optional[int],
                             status: Optional[str] = STATUS_ACTIVE) -> list[UserFile]:
        stmt = select(UserFile).where(UserFile.user_id == user_id)
        stmt = stmt.where(UserFile.folder_id.is_(None) if folder_id is None else UserFile.folder_id == folder_id)
        if status:
            stmt = stmt.where(UserFile.status == status)
        return list(self.session.execute(stmt).scalars())

    def find_files_by_status(self, user_id: int, status: str) -> list[UserFile]:
        return list(self.session.execute(
            select(UserFile).where(UserFile.user_id == user_id, UserFile.status == status)
        ).scalars())

    def find_favorite_files(self, user_id: int) -> list[UserFile]:
        return list(self.session.execute(
            select(UserFile).where(
                UserFile.user_id == user_id,
                UserFile.status == STATUS_ACTIVE,
                UserFile.favorite.is_(True),
            )
        ).scalars())

    def search_files(self, user_id: int, query: str = "", type_filter: Optional[str] = None) -> list[UserFile]:
        stmt = select(UserFile).where(UserFile.user_id == user_id, UserFile.status == STATUS_ACTIVE)
        if query:
            pattern = f"%{_escape_like(query.lower())}%"
            stmt = stmt.where(or_(
                func.lower(UserFile.name).like(pattern, escape="\\"),
                func.lower(UserFile.original_name).like(pattern, escape="\\"),
            ))
        patterns = TYPE_FILTERS.get(type_filter or "all")
        if patterns:
            stmt = stmt.where(or_(*[UserFile.type.like(p) for p in patterns]))
        return list(self.session.execute(stmt).scalars())

    # ---------------------------------------------------------------- shares
    def find_share_by_token(self, token: str) -> Optional[Share]:
        # global lookup: the token itself is the access boundary
        if not token:
            return None
        return self.session.execute(select(Share).where(Share.token == token)).scalar_one_or_none()

    def delete_shares_for(self, *, file_ids=(), folder_ids=()) -> int:
        removed = 0
        if file_ids:
            removed += self.session.execute(
                delete(Share).where(Share.file_id.in_(list(file_ids))).execution_options(synchronize_session=False)
            ).rowcount or 0
        if folder_ids:
            removed += self.session.execute(
                delete(Share).where(Share.folder_id.in_(list(folder_ids))).execution_options(synchronize_session=False)
            ).rowcount or 0
        return removed

    def delete_expired_shares(self, now: datetime) -> int:
        result = self.session.execute(
            delete(Share)
            .where(Share.expires_at.is_not(None), Share.expires_at < now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0


repo = Repository()
