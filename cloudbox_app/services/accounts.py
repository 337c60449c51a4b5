# cloudbox_app/services/accounts.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import Optional

from flask import current_app

from ..errors import ValidationFailedError
from ..models import User
from .lifecycle import transaction
from .repository import repo

MIN_USERNAME = 3
MIN_PASSWORD = 6

def create_user(username: str, password: str, *, email: Optional[str] = None,
                full_name: Optional[str] = None, storage_limit: Optional[int] = None) -> User:
    username = (username or "").strip()
    if len(username) < MIN_USERNAME:
        raise ValidationFailedError(f"Username must be at least {MIN_USERNAME} characters")
    if len(password or "") < MIN_PASSWORD:
        raise ValidationFailedError(f"Password must be at least {MIN_PASSWORD} characters")
    limit = storage_limit if storage_limit is not None else current_app.config.get("DEFAULT_STORAGE_LIMIT")
    if not limit or limit <= 0:
        raise ValidationFailedError("Storage limit must be positive")

    with transaction("create user"):
        if repo.find_user_by_username(username):
            raise ValidationFailedError("Username already exists")
        if email and User.query.filter_by(email=email).first():
            raise ValidationFailedError("Email already registered")
        user = User(username=username, email=email or None, full_name=full_name,
                    storage_used=0, storage_limit=limit)
        user.set_password(password)
        repo.session.add(user)
        repo.session.flush()
    return user

def authenticate(username: str, password: str) -> Optional[User]:
    user = repo.find_user_by_username((username or "").strip())
    if not user or not user.check_password(password or ""):
        return None
    return user
