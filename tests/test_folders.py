# tests/test_folders.py
from __future__ import annotations

import pytest

from cloudbox_app.errors import ForbiddenError, NotFoundError, ValidationFailedError
from cloudbox_app.extensions import db
from cloudbox_app.models import Folder, Share, UserFile
from cloudbox_app.services import contents, lifecycle, quota, sharing
from cloudbox_app.services.blob_store import get_blob_store

from conftest import upload


def test_create_folder_at_root_and_nested(user):
    docs = lifecycle.create_folder(user.id, "Docs")
    work = lifecycle.create_folder(user.id, "Work", docs.id)
    assert docs.parent_id is None and docs.path == "/Docs"
    assert work.parent_id == docs.id and work.path == "/Docs/Work"
    assert docs.status == "active"


def test_create_folder_in_foreign_parent_is_forbidden(user, other_user):
    theirs = lifecycle.create_folder(other_user.id, "Theirs")
    with pytest.raises(ForbiddenError):
        lifecycle.create_folder(user.id, "Mine", theirs.id)


def test_create_folder_missing_parent(user):
    with pytest.raises(NotFoundError):
        lifecycle.create_folder(user.id, "Orphan", 12345)


@pytest.mark.parametrize("name", ["", "   ", "a/b", "..", "x" * 256])
def test_create_folder_rejects_bad_names(user, name):
    with pytest.raises(ValidationFailedError):
        lifecycle.create_folder(user.id, name)


def test_rename_folder_recomputes_descendant_paths(user):
    a = lifecycle.create_folder(user.id, "A")
    b = lifecycle.create_folder(user.id, "B", a.id)
    c = lifecycle.create_folder(user.id, "C", b.id)

    lifecycle.rename_folder(user.id, a.id, "Alpha")
    assert db.session.get(Folder, a.id).path == "/Alpha"
    assert db.session.get(Folder, b.id).path == "/Alpha/B"
    assert db.session.get(Folder, c.id).path == "/Alpha/B/C"


def test_rename_folder_requires_ownership(user, other_user):
    a = lifecycle.create_folder(user.id, "A")
    with pytest.raises(ForbiddenError):
        lifecycle.rename_folder(other_user.id, a.id, "Mine now")


def test_move_folder_updates_paths(user):
    a = lifecycle.create_folder(user.id, "A")
    b = lifecycle.create_folder(user.id, "B")
    c = lifecycle.create_folder(user.id, "C", b.id)

    lifecycle.move_folder(user.id, b.id, a.id)
    assert db.session.get(Folder, b.id).path == "/A/B"
    assert db.session.get(Folder, c.id).path == "/A/B/C"

    lifecycle.move_folder(user.id, b.id, None)
    assert db.session.get(Folder, c.id).path == "/B/C"


def test_move_folder_into_own_subtree_is_rejected(user):
    a = lifecycle.create_folder(user.id, "A")
    b = lifecycle.create_folder(user.id, "B", a.id)
    with pytest.raises(ValidationFailedError):
        lifecycle.move_folder(user.id, a.id, b.id)
    with pytest.raises(ValidationFailedError):
        lifecycle.move_folder(user.id, a.id, a.id)
    assert db.session.get(Folder, a.id).parent_id is None


def test_delete_folder_cascades_fully(user):
    a = lifecycle.create_folder(user.id, "A")
    b = lifecycle.create_folder(user.id, "B", a.id)
    c = lifecycle.create_folder(user.id, "C", b.id)
    fa = upload(user.id, "fa.txt", 10, folder_id=a.id)
    fb = upload(user.id, "fb.txt", 20, folder_id=b.id)
    fc = upload(user.id, "fc.txt", 30, folder_id=c.id)
    lifecycle.trash(user.id, fc.id)
    keep = upload(user.id, "keep.txt", 5)
    sharing.issue(user.id, "folder", b.id)
    sharing.issue(user.id, "file", fb.id)
    ids = {"folders": [a.id, b.id, c.id], "files": [fa.id, fb.id, fc.id]}
    keys = [fa.path, fb.path, fc.path]

    assert lifecycle.delete_folder(user.id, a.id) == 60

    for folder_id in ids["folders"]:
        assert db.session.get(Folder, folder_id) is None
    for file_id in ids["files"]:
        assert db.session.get(UserFile, file_id) is None
    store = get_blob_store()
    assert not any(store.exists(k) for k in keys)
    assert quota.get_stats(user.id)["used"] == 5
    assert Share.query.filter_by(user_id=user.id).count() == 0
    assert db.session.get(UserFile, keep.id) is not None


def test_delete_folder_requires_ownership(user, other_user):
    a = lifecycle.create_folder(user.id, "A")
    with pytest.raises(ForbiddenError):
        lifecycle.delete_folder(other_user.id, a.id)
    with pytest.raises(NotFoundError):
        lifecycle.delete_folder(user.id, 987654)


def test_failed_delete_folder_rolls_back(user, monkeypatch):
    a = lifecycle.create_folder(user.id, "A")
    b = lifecycle.create_folder(user.id, "B", a.id)
    fa = upload(user.id, "fa.txt", 10, folder_id=a.id)
    fb = upload(user.id, "fb.txt", 20, folder_id=b.id)
    share = sharing.issue(user.id, "folder", b.id)
    folder_ids, file_ids, share_id = [a.id, b.id], [fa.id, fb.id], share.id
    keys = [fa.path, fb.path]

    def _fail(*args, **kwargs):
        raise RuntimeError("audit write failed")
    monkeypatch.setattr("cloudbox_app.services.audit.record", _fail)

    with pytest.raises(RuntimeError):
        lifecycle.delete_folder(user.id, a.id)

    assert all(db.session.get(Folder, i) is not None for i in folder_ids)
    assert all(db.session.get(UserFile, i) is not None for i in file_ids)
    assert db.session.get(Share, share_id) is not None
    assert quota.get_stats(user.id)["used"] == 30
    store = get_blob_store()
    assert all(store.exists(k) for k in keys)


def test_end_to_end_scenario(user):
    a = upload(user.id, "a.txt", 100)
    assert quota.get_stats(user.id)["used"] == 100

    docs = lifecycle.create_folder(user.id, "Docs")
    upload(user.id, "b.txt", 200, folder_id=docs.id)
    assert quota.get_stats(user.id)["used"] == 300

    lifecycle.trash(user.id, a.id)
    assert quota.get_stats(user.id)["used"] == 300
    root_files = [f["name"] for f in contents.list_contents(user.id, None)["files"]]
    assert "a.txt" not in root_files

    lifecycle.delete_folder(user.id, docs.id)
    assert quota.get_stats(user.id)["used"] == 100

    lifecycle.purge(user.id, a.id)
    assert quota.get_stats(user.id)["used"] == 0
