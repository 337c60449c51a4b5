# cloudbox_app/services/validation.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from typing import Optional

from flask import current_app

from ..errors import ValidationFailedError
from ..models import PERMISSIONS

MAX_NAME_LENGTH = 255

ALLOWED_FILE_TYPES = {
    "images": ["image/jpeg", "image/png", "image/gif", "image/webp", "image/svg+xml"],
    "documents": [
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-powerpoint",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        "text/plain",
        "text/csv",
        "application/rtf",
    ],
    "videos": ["video/mp4", "video/webm", "video/ogg", "video/quicktime"],
    "audio": ["audio/mpeg", "audio/ogg", "audio/wav", "audio/webm"],
    "archives": [
        "application/zip",
        "application/x-zip-compressed",
        "application/x-rar-compressed",
        "application/x-7z-compressed",
        "application/gzip",
    ],
}
ALLOWED_MIME_TYPES = {m for group in ALLOWED_FILE_TYPES.values() for m in group}

SEARCH_TYPES = ("all", "images", "documents", "videos", "audio")


def clean_name(name: Optional[str], what: str = "Name") -> str:
    value = (name or "").strip()
    if not value:
        raise ValidationFailedError(f"{what} is required")
    if len(value) > MAX_NAME_LENGTH:
        raise ValidationFailedError(f"{what} must be at most {MAX_NAME_LENGTH} characters")
    if "/" in value or "\\" in value or value in (".", ".."):
        raise ValidationFailedError(f"{what} contains invalid characters")
    return value


def check_upload(size: int, mime_type: Optional[str]) -> None:
    if size is None or size <= 0:
        raise ValidationFailedError("File is empty")
    max_size = current_app.config.get("MAX_FILE_SIZE")
    if max_size and size > max_size:
        raise ValidationFailedError(
            "File is too large", details={"size": size, "maxSize": max_size})
    if mime_type not in ALLOWED_MIME_TYPES:
        raise ValidationFailedError(f"File type {mime_type} is not allowed")


def check_permission(permission: Optional[str]) -> str:
    value = permission or "view"
    if value not in PERMISSIONS:
        raise ValidationFailedError(f"Invalid permission: {value}")
    return value


def check_search_type(type_filter: Optional[str]) -> Optional[str]:
    if type_filter in (None, ""):
        return None
    if type_filter not in SEARCH_TYPES:
        raise ValidationFailedError(f"Invalid type filter: {type_filter}")
    return type_filter


def parse_optional_id(value, what: str = "id") -> Optional[int]:
    """Accepts None/''/'null' as root, otherwise a positive integer."""
    if value is None or value == "" or value == "null":
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationFailedError(f"Invalid {what}: {value!r}")
    if parsed <= 0:
        raise ValidationFailedError(f"Invalid {what}: {value!r}")
    return parsed


def parse_datetime(value) -> Optional[datetime]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise ValidationFailedError(f"Invalid date: {value!r}")
    if parsed.tzinfo is not None:
        # stored naive UTC, like every other timestamp column
        parsed = datetime.utcfromtimestamp(parsed.timestamp())
    return parsed
