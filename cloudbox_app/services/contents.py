# cloudbox_app/services/contents.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import Optional
from urllib.parse import urlencode

from flask import current_app

from ..models import UserFile, STATUS_TRASHED
from . import paths
from .lifecycle import get_owned_folder
from .repository import repo
from .validation import check_search_type

ROOT_CRUMB = {"id": None, "name": "Home"}


def file_url(file_id: int, *, download: bool = False, token: Optional[str] = None,
             password: Optional[str] = None) -> str:
    """``{API_PREFIX}/files/<id>/content[?download=true][&token=..&password=..]``"""
    prefix = current_app.config.get("API_PREFIX", "/api").rstrip("/")
    params = {}
    if download:
        params["download"] = "true"
    if token:
        params["token"] = token
        if password:
            params["password"] = password
    url = f"{prefix}/files/{file_id}/content"
    return f"{url}?{urlencode(params)}" if params else url


def file_payload(f: UserFile, **url_kwargs) -> dict:
    data = f.to_dict()
    data["url"] = file_url(f.id, **url_kwargs)
    return data


def list_contents(user_id: int, folder_id: Optional[int], *, token: Optional[str] = None,
                  password: Optional[str] = None) -> dict:
    """
    Active folders and files directly under ``folder_id`` (None = root) for
    ``user_id``, with per-folder item counts, content URLs and breadcrumbs.
    Ordering is left to the caller.
    """
    if folder_id is not None:
        get_owned_folder(user_id, folder_id)

    folders = []
    for folder in repo.find_folders_by_parent(user_id, folder_id):
        data = folder.to_dict()
        data["itemCount"] = repo.count_children(user_id, folder.id)
        folders.append(data)

    files = [file_payload(f, token=token, password=password)
             for f in repo.find_files_by_folder(user_id, folder_id)]

    return {
        "folders": folders,
        "files": files,
        "breadcrumbs": [dict(ROOT_CRUMB), *paths.resolve_path(folder_id)],
    }


def list_trash(user_id: int) -> list[dict]:
    return [file_payload(f) for f in repo.find_files_by_status(user_id, STATUS_TRASHED)]


def list_favorites(user_id: int) -> list[dict]:
    return [file_payload(f) for f in repo.find_favorite_files(user_id)]


def search_files(user_id: int, query: str = "", type_filter: Optional[str] = None) -> list[dict]:
    type_filter = check_search_type(type_filter)
    return [file_payload(f) for f in repo.search_files(user_id, (query or "").strip(), type_filter)]
