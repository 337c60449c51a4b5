# cloudbox_app/blueprints/folders.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import Blueprint, jsonify, request

from cloudbox_app.decorators import current_user, login_required
from cloudbox_app.services import contents, lifecycle
from cloudbox_app.services.validation import parse_optional_id

bp = Blueprint("folders", __name__)

@bp.route("/folders/contents")
@bp.route("/folders/<int:folder_id>/contents")
@login_required
def folder_contents(folder_id: int | None = None):
    return jsonify(contents.list_contents(current_user().id, folder_id))

@bp.route("/folders", methods=["POST"])
@login_required
def create_folder():
    data = request.get_json(silent=True) or {}
    folder = lifecycle.create_folder(
        current_user().id, data.get("name"), parse_optional_id(data.get("parentId"), "parentId"))
    return jsonify(folder.to_dict()), 201

@bp.route("/folders/<int:folder_id>/rename", methods=["PATCH"])
@login_required
def rename_folder(folder_id: int):
    data = request.get_json(silent=True) or {}
    folder = lifecycle.rename_folder(current_user().id, folder_id, data.get("name"))
    return jsonify(folder.to_dict())

@bp.route("/folders/<int:folder_id>/move", methods=["PATCH"])
@login_required
def move_folder(folder_id: int):
    data = request.get_json(silent=True) or {}
    dest = parse_optional_id(data.get("destinationFolderId"), "destinationFolderId")
    folder = lifecycle.move_folder(current_user().id, folder_id, dest)
    return jsonify(folder.to_dict())

@bp.route("/folders/<int:folder_id>", methods=["DELETE"])
@login_required
def delete_folder(folder_id: int):
    lifecycle.delete_folder(current_user().id, folder_id)
    return "", 204
