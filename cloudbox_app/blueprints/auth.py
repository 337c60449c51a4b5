# cloudbox_app/blueprints/auth.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import Blueprint, jsonify, request, session

from cloudbox_app.decorators import current_user, login_required
from cloudbox_app.services import accounts, quota
from cloudbox_app.services.audit import history

bp = Blueprint("auth", __name__)

def _login(u):
    session["user"] = {"id": u.id, "username": u.username}

@bp.route("/register", methods=["POST"])
def register():
    data = request.get_json(silent=True) or request.form
    if data.get("confirmPassword") is not None and data.get("confirmPassword") != data.get("password"):
        return jsonify({"message": "Passwords don't match"}), 400
    u = accounts.create_user(
        data.get("username", ""), data.get("password", ""),
        email=data.get("email"), full_name=data.get("fullName"),
    )
    _login(u)
    return jsonify(u.to_dict()), 201

@bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or request.form
    u = accounts.authenticate(data.get("username", ""), data.get("password", ""))
    if u is None:
        return jsonify({"message": "Invalid credentials"}), 401
    _login(u)
    return jsonify(u.to_dict())

@bp.route("/logout", methods=["POST"])
def logout():
    session.clear()
    return "", 204

@bp.route("/user")
@login_required
def me():
    return jsonify(current_user().to_dict())

@bp.route("/user/storage")
@login_required
def storage():
    return jsonify(quota.get_stats(current_user().id))

@bp.route("/user/activity")
@login_required
def activity():
    limit = max(1, min(request.args.get("limit", 100, type=int), 500))
    rows = history(current_user().id, limit=limit)
    return jsonify([
        {"action": r.action, "ref": r.ref, "description": r.description,
         "createdAt": r.created_at.isoformat() if r.created_at else None}
        for r in rows
    ])
