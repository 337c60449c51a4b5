# cloudbox_app/decorators.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from functools import wraps
from flask import session, jsonify

from .extensions import db
from .models import User

def current_user():
    data = session.get("user")
    if not data or not data.get("id"):
        return None
    return db.session.get(User, data["id"])

def login_required(view_func):
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            return jsonify({"message": "Authentication required"}), 401
        return view_func(*args, **kwargs)
    return wrapper
