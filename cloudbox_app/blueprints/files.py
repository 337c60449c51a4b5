# cloudbox_app/blueprints/files.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import Blueprint, jsonify, request, send_file

from cloudbox_app.decorators import current_user, login_required
from cloudbox_app.errors import ForbiddenError, NotFoundError, ValidationFailedError
from cloudbox_app.models import UserFile, STATUS_ACTIVE
from cloudbox_app.services import contents, lifecycle, sharing
from cloudbox_app.services.blob_store import get_blob_store
from cloudbox_app.services.repository import repo
from cloudbox_app.services.validation import parse_optional_id

bp = Blueprint("files", __name__)

@bp.route("/files/upload", methods=["POST"])
@login_required
def upload():
    file = request.files.get("file")
    if not file or not file.filename:
        raise ValidationFailedError("No file uploaded")
    rec = lifecycle.upload_file(
        current_user().id,
        filename=file.filename,
        data=file.read(),
        mime_type=file.mimetype,
        folder_id=parse_optional_id(request.form.get("folderId"), "folderId"),
    )
    return jsonify(contents.file_payload(rec)), 201

@bp.route("/files/<int:file_id>")
@login_required
def get_file(file_id: int):
    f = lifecycle.get_owned_file(current_user().id, file_id)
    return jsonify(contents.file_payload(f))

def _file_for_token(file_id: int, token: str) -> UserFile:
    share = sharing.check_access(token, request.args.get("password"))
    if not sharing.authorize_file_within_share(share, file_id):
        raise ForbiddenError("This share does not include the requested file")
    f = repo.get(UserFile, file_id)
    if f is None or f.status != STATUS_ACTIVE:
        raise NotFoundError("File not found")
    return f

@bp.route("/files/<int:file_id>/content")
def file_content(file_id: int):
    token = request.args.get("token")
    if token:
        f = _file_for_token(file_id, token)
    else:
        user = current_user()
        if user is None:
            return jsonify({"message": "Authentication required"}), 401
        f = lifecycle.get_owned_file(user.id, file_id)

    store = get_blob_store()
    if not store.exists(f.path):
        raise NotFoundError("File content not found")
    return send_file(
        str(store.path(f.path)),
        mimetype=f.type,
        as_attachment=request.args.get("download") == "true",
        download_name=f.original_name,
    )

@bp.route("/files/<int:file_id>/rename", methods=["PATCH"])
@login_required
def rename_file(file_id: int):
    data = request.get_json(silent=True) or {}
    f = lifecycle.rename_file(current_user().id, file_id, data.get("name"))
    return jsonify(contents.file_payload(f))

@bp.route("/files/<int:file_id>/move", methods=["PATCH"])
@login_required
def move_file(file_id: int):
    data = request.get_json(silent=True) or {}
    dest = parse_optional_id(data.get("destinationFolderId"), "destinationFolderId")
    f = lifecycle.move_file(current_user().id, file_id, dest)
    return jsonify(contents.file_payload(f))

@bp.route("/files/<int:file_id>/favorite", methods=["PATCH"])
@login_required
def toggle_favorite(file_id: int):
    f = lifecycle.toggle_favorite(current_user().id, file_id)
    return jsonify(contents.file_payload(f))

@bp.route("/files/<int:file_id>", methods=["DELETE"])
@login_required
def trash_file(file_id: int):
    lifecycle.trash(current_user().id, file_id)
    return "", 204

@bp.route("/files/<int:file_id>/restore", methods=["POST"])
@login_required
def restore_file(file_id: int):
    f = lifecycle.restore(current_user().id, file_id)
    return jsonify(contents.file_payload(f))

@bp.route("/files/<int:file_id>/permanent", methods=["DELETE"])
@login_required
def purge_file(file_id: int):
    lifecycle.purge(current_user().id, file_id)
    return "", 204

@bp.route("/files/favorites")
@login_required
def favorites():
    return jsonify(contents.list_favorites(current_user().id))

@bp.route("/search")
@login_required
def search():
    return jsonify(contents.search_files(
        current_user().id, request.args.get("query", ""), request.args.get("type")))

@bp.route("/trash")
@login_required
def trash_list():
    return jsonify(contents.list_trash(current_user().id))

@bp.route("/trash", methods=["DELETE"])
@login_required
def empty_trash():
    lifecycle.empty_trash(current_user().id)
    return "", 204
