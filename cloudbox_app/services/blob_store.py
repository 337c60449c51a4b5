# cloudbox_app/services/blob_store.py
# -*- coding: utf-8 -*-
from __future__ import annotations
import datetime
import os
import uuid
from pathlib import Path
from flask import current_app
from werkzeug.utils import secure_filename


class LocalBlobStore:
    """Raw file bytes on the local filesystem, addressed by an opaque relative key."""

    def __init__(self, root: str | os.PathLike):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def new_key(self, user_id: int, filename: str) -> str:
        ext = os.path.splitext(secure_filename(filename))[1].lower()
        month = datetime.datetime.utcnow().strftime("%Y/%m")
        return f"user_{user_id}/{month}/{uuid.uuid4().hex}{ext}"

    def path(self, key: str) -> Path:
        target = (self.root / key).resolve()
        if self.root.resolve() not in target.parents:
            raise ValueError(f"Blob key escapes the store root: {key!r}")
        return target

    def put(self, key: str, data: bytes) -> None:
        target = self.path(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as fh:
            fh.write(data)

    def get(self, key: str) -> bytes:
        return self.path(key).read_bytes()

    def exists(self, key: str) -> bool:
        return self.path(key).is_file()

    def delete(self, key: str) -> None:
        self.path(key).unlink(missing_ok=True)


def init_blob_store(app):
    app.extensions["blob_store"] = LocalBlobStore(app.config.get("UPLOAD_FOLDER", "./uploads"))

def get_blob_store() -> LocalBlobStore:
    """
    Returns the store bound to the current app, rebuilding it when
    UPLOAD_FOLDER changed since it was created.
    """
    root = Path(current_app.config.get("UPLOAD_FOLDER", "./uploads"))
    store = current_app.extensions.get("blob_store")
    if store is None or store.root != root:
        store = LocalBlobStore(root)
        current_app.extensions["blob_store"] = store
    return store
