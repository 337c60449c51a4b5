# cloudbox_app/blueprints/shares.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import Blueprint, jsonify, request

from cloudbox_app.decorators import current_user, login_required
from cloudbox_app.errors import ValidationFailedError
from cloudbox_app.services import sharing
from cloudbox_app.services.validation import parse_datetime, parse_optional_id

bp = Blueprint("shares", __name__)

def _share_url(token: str) -> str:
    return f"{request.host_url.rstrip('/')}/share/{token}"

@bp.route("/shares", methods=["POST"])
@login_required
def create_share():
    data = request.get_json(silent=True) or {}
    target_id = parse_optional_id(data.get("id"), "id")
    if target_id is None:
        raise ValidationFailedError("Share target id is required")
    share = sharing.issue(
        current_user().id,
        data.get("type"),
        target_id,
        permission=data.get("permission") or "view",
        password=data.get("password") or None,
        expires_at=parse_datetime(data.get("expiresAt")),
    )
    return jsonify({**share.to_dict(), "shareUrl": _share_url(share.token)}), 201

@bp.route("/shares")
@login_required
def list_shares():
    return jsonify([
        {**s.to_dict(), "shareUrl": _share_url(s.token)}
        for s in sharing.list_shares(current_user().id)
    ])

@bp.route("/shares/<token>")
def resolve_share(token: str):
    return jsonify(sharing.resolve(token, request.args.get("password")))

@bp.route("/shares/<int:share_id>", methods=["DELETE"])
@login_required
def revoke_share(share_id: int):
    sharing.revoke(current_user().id, share_id)
    return "", 204
