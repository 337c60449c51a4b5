# cloudbox_app/services/lifecycle.py
# -*- coding: utf-8 -*-
"""
Folder and file mutations.

File status machine::

    active --trash--> trashed --restore--> active
    active|trashed --purge--> (row + blob removed, quota released)

Folder deletion is a hard, recursive purge of everything below the folder.
Every public function here is one transaction: it commits on success and
rolls back on any error. Blob removal happens after the commit and is
best-effort (a failure is logged, the metadata change stands).
"""
from __future__ import annotations
from contextlib import contextmanager
from datetime import datetime
from typing import Iterable, Optional

from flask import current_app

from ..errors import (
    CloudboxError, CorruptHierarchyError, ForbiddenError, NotFoundError, ValidationFailedError,
)
from ..extensions import db
from ..models import Folder, UserFile, STATUS_ACTIVE, STATUS_TRASHED, STATUS_DELETED
from . import audit, paths, quota
from .blob_store import get_blob_store
from .repository import repo
from .validation import check_upload, clean_name


@contextmanager
def transaction(action: str):
    try:
        yield
        db.session.commit()
    except CloudboxError:
        db.session.rollback()
        raise
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to %s", action)
        raise


def remove_blobs(keys: Iterable[str]) -> None:
    store = get_blob_store()
    for key in keys:
        try:
            store.delete(key)
        except (OSError, ValueError) as e:
            current_app.logger.warning("Could not delete blob %s: %s", key, e)


# ——————————————————————————————————————————————————————————————
# ownership lookups
# ——————————————————————————————————————————————————————————————
def get_owned_folder(user_id: int, folder_id: int) -> Folder:
    folder = repo.get(Folder, folder_id)
    if folder is None or folder.status == STATUS_DELETED:
        raise NotFoundError("Folder not found", details={"folderId": folder_id})
    if folder.user_id != user_id:
        raise ForbiddenError("You don't have access to this folder", details={"folderId": folder_id})
    return folder

def get_owned_file(user_id: int, file_id: int) -> UserFile:
    f = repo.get(UserFile, file_id)
    if f is None or f.status == STATUS_DELETED:
        raise NotFoundError("File not found", details={"fileId": file_id})
    if f.user_id != user_id:
        raise ForbiddenError("You don't have access to this file", details={"fileId": file_id})
    return f

def _check_parent(user_id: int, parent_id: Optional[int]) -> Optional[Folder]:
    if parent_id is None:
        return None
    try:
        return get_owned_folder(user_id, parent_id)
    except NotFoundError:
        raise NotFoundError("Parent folder not found", details={"folderId": parent_id})


# ——————————————————————————————————————————————————————————————
# folders
# ——————————————————————————————————————————————————————————————
def create_folder(user_id: int, name: str, parent_id: Optional[int] = None) -> Folder:
    name = clean_name(name, "Folder name")
    with transaction("create folder"):
        _check_parent(user_id, parent_id)
        folder = repo.create(
            Folder, name=name, user_id=user_id, parent_id=parent_id,
            status=STATUS_ACTIVE, path=paths.materialized_path(parent_id, name),
        )
    return folder

def rename_folder(user_id: int, folder_id: int, name: str) -> Folder:
    name = clean_name(name, "Folder name")
    with transaction("rename folder"):
        folder = get_owned_folder(user_id, folder_id)
        repo.update(Folder, folder.id, name=name)
        paths.refresh_subtree_paths(folder)
    return folder

def move_folder(user_id: int, folder_id: int, destination_id: Optional[int]) -> Folder:
    with transaction("move folder"):
        folder = get_owned_folder(user_id, folder_id)
        if destination_id is not None:
            _check_parent(user_id, destination_id)
            if paths.is_descendant(destination_id, folder.id):
                raise ValidationFailedError("Cannot move a folder into itself or one of its subfolders")
        repo.update(Folder, folder.id, parent_id=destination_id)
        paths.refresh_subtree_paths(folder)
    return folder

def _purge_row(f: UserFile, blob_keys: list[str]) -> int:
    repo.delete_shares_for(file_ids=[f.id])
    size, user_id, key = f.size, f.user_id, f.path
    repo.delete(UserFile, f.id)
    quota.release(user_id, size)
    blob_keys.append(key)
    return size

def _cascade(folder: Folder, blob_keys: list[str], seen: set[int]) -> int:
    if folder.id in seen:
        raise CorruptHierarchyError(f"Cycle detected in folder hierarchy at folder {folder.id}")
    seen.add(folder.id)
    released = 0
    for f in repo.find_files_by_folder(folder.user_id, folder.id, status=None):
        released += _purge_row(f, blob_keys)
    for child in repo.find_folders_by_parent(folder.user_id, folder.id, status=None):
        released += _cascade(child, blob_keys, seen)
    repo.delete_shares_for(folder_ids=[folder.id])
    repo.delete(Folder, folder.id)
    return released

def delete_folder(user_id: int, folder_id: int) -> int:
    """Recursively and permanently deletes a folder; returns the bytes released."""
    blob_keys: list[str] = []
    with transaction("delete folder"):
        folder = get_owned_folder(user_id, folder_id)
        name = folder.name
        released = _cascade(folder, blob_keys, set())
        audit.record(user_id, "folder_delete", f"folder:{folder_id}", name)
    current_app.logger.info(
        "Folder %s deleted: %d files, %d bytes released", folder_id, len(blob_keys), released)
    remove_blobs(blob_keys)
    return released


# ——————————————————————————————————————————————————————————————
# files
# ——————————————————————————————————————————————————————————————
def upload_file(user_id: int, *, filename: str, data: bytes, mime_type: str,
                folder_id: Optional[int] = None) -> UserFile:
    """Quota check, blob write, then the metadata row; all or nothing."""
    name = clean_name(filename, "File name")
    size = len(data or b"")
    check_upload(size, mime_type)

    store = get_blob_store()
    key = store.new_key(user_id, name)
    written = False
    try:
        with transaction("upload file"):
            _check_parent(user_id, folder_id)
            quota.charge(user_id, size)
            written = True
            store.put(key, data)
            rec = repo.create(
                UserFile, name=name, original_name=name, type=mime_type, size=size,
                user_id=user_id, folder_id=folder_id, path=key,
                status=STATUS_ACTIVE, favorite=False, deleted_at=None,
            )
            audit.record(user_id, "upload", f"file:{rec.id}", name)
    except Exception:
        if written:
            remove_blobs([key])
        raise
    current_app.logger.info("User %s uploaded %s (%d bytes)", user_id, key, size)
    return rec

def rename_file(user_id: int, file_id: int, name: str) -> UserFile:
    name = clean_name(name, "File name")
    with transaction("rename file"):
        f = get_owned_file(user_id, file_id)
        repo.update(UserFile, f.id, name=name)
    return f

def move_file(user_id: int, file_id: int, destination_id: Optional[int]) -> UserFile:
    with transaction("move file"):
        f = get_owned_file(user_id, file_id)
        _check_parent(user_id, destination_id)
        repo.update(UserFile, f.id, folder_id=destination_id)
    return f

def toggle_favorite(user_id: int, file_id: int) -> UserFile:
    with transaction("toggle favorite"):
        f = get_owned_file(user_id, file_id)
        repo.update(UserFile, f.id, favorite=not bool(f.favorite))
    return f

def trash(user_id: int, file_id: int) -> UserFile:
    with transaction("trash file"):
        f = get_owned_file(user_id, file_id)
        if f.status != STATUS_ACTIVE:
            raise ValidationFailedError("File is already in the trash", details={"fileId": file_id})
        repo.update(UserFile, f.id, status=STATUS_TRASHED, deleted_at=datetime.utcnow())
        audit.record(user_id, "trash", f"file:{f.id}", f.name)
    return f

def restore(user_id: int, file_id: int) -> UserFile:
    with transaction("restore file"):
        f = get_owned_file(user_id, file_id)
        if f.status != STATUS_TRASHED:
            raise ValidationFailedError("File is not in the trash", details={"fileId": file_id})
        repo.update(UserFile, f.id, status=STATUS_ACTIVE, deleted_at=None)
        audit.record(user_id, "restore", f"file:{f.id}", f.name)
    return f

def purge(user_id: int, file_id: int) -> int:
    """Permanently deletes a file; returns the bytes released."""
    blob_keys: list[str] = []
    with transaction("purge file"):
        f = get_owned_file(user_id, file_id)
        name = f.name
        released = _purge_row(f, blob_keys)
        audit.record(user_id, "purge", f"file:{file_id}", name)
    remove_blobs(blob_keys)
    return released

def empty_trash(user_id: int) -> int:
    blob_keys: list[str] = []
    released = 0
    with transaction("empty trash"):
        trashed = repo.find_files_by_status(user_id, STATUS_TRASHED)
        for f in trashed:
            released += _purge_row(f, blob_keys)
        if trashed:
            audit.record(user_id, "empty_trash", None, f"{len(trashed)} files")
    current_app.logger.info("Trash emptied for user %s: %d bytes released", user_id, released)
    remove_blobs(blob_keys)
    return released
