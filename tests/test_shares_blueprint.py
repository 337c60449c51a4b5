# tests/test_shares_blueprint.py
from __future__ import annotations
import io
from datetime import datetime, timedelta

from cloudbox_app.extensions import db
from cloudbox_app.models import Share


def _upload(client, name="a.txt", data=b"shared bytes", folder_id=None):
    form = {"file": (io.BytesIO(data), name, "text/plain")}
    if folder_id is not None:
        form["folderId"] = str(folder_id)
    return client.post("/api/files/upload", data=form, content_type="multipart/form-data").get_json()


def test_file_share_roundtrip(app, logged_client):
    f = _upload(logged_client)
    r = logged_client.post("/api/shares", json={"id": f["id"], "type": "file"})
    assert r.status_code == 201
    share = r.get_json()
    assert share["permission"] == "view" and share["hasPassword"] is False
    assert share["shareUrl"].endswith(f"/share/{share['token']}")

    anon = app.test_client()
    body = anon.get(f"/api/shares/{share['token']}").get_json()
    assert body["item"]["type"] == "file"
    assert body["item"]["id"] == f["id"]
    content = anon.get(body["item"]["url"])
    assert content.status_code == 200 and content.data == b"shared bytes"

    assert [s["id"] for s in logged_client.get("/api/shares").get_json()] == [share["id"]]
    assert logged_client.delete(f"/api/shares/{share['id']}").status_code == 204
    assert anon.get(f"/api/shares/{share['token']}").status_code == 404


def test_password_gate(app, logged_client):
    f = _upload(logged_client)
    share = logged_client.post("/api/shares", json={"id": f["id"], "type": "file",
                                                    "password": "hunter22"}).get_json()
    anon = app.test_client()

    r = anon.get(f"/api/shares/{share['token']}")
    assert r.status_code == 401
    assert r.get_json()["passwordRequired"] is True
    assert anon.get(f"/api/shares/{share['token']}?password=nope").status_code == 401

    ok = anon.get(f"/api/shares/{share['token']}?password=hunter22").get_json()
    assert "password=hunter22" in ok["item"]["url"]
    assert anon.get(ok["item"]["url"]).status_code == 200
    assert anon.get(f"/api/files/{f['id']}/content?token={share['token']}").status_code == 401


def test_expired_share_is_gone(app, logged_client):
    f = _upload(logged_client)
    share = logged_client.post("/api/shares", json={"id": f["id"], "type": "file"}).get_json()
    with app.app_context():
        db.session.get(Share, share["id"]).expires_at = datetime.utcnow() - timedelta(minutes=1)
        db.session.commit()
    assert app.test_client().get(f"/api/shares/{share['token']}").status_code == 410

    past = (datetime.utcnow() - timedelta(days=1)).isoformat()
    r = logged_client.post("/api/shares", json={"id": f["id"], "type": "file", "expiresAt": past})
    assert r.status_code == 400


def test_folder_share_scopes_files(app, logged_client):
    folder = logged_client.post("/api/folders", json={"name": "Pub"}).get_json()
    inside = _upload(logged_client, "in.txt", folder_id=folder["id"])
    outside = _upload(logged_client, "out.txt")
    share = logged_client.post("/api/shares", json={"id": folder["id"], "type": "folder",
                                                    "permission": "edit"}).get_json()
    anon = app.test_client()
    body = anon.get(f"/api/shares/{share['token']}").get_json()
    assert body["item"]["type"] == "folder"
    assert [x["id"] for x in body["item"]["files"]] == [inside["id"]]
    assert anon.get(body["item"]["files"][0]["url"]).status_code == 200
    assert anon.get(f"/api/files/{outside['id']}/content?token={share['token']}").status_code == 403


def test_share_validation(app, logged_client):
    f = _upload(logged_client)
    assert logged_client.post("/api/shares", json={"type": "file"}).status_code == 400
    assert logged_client.post("/api/shares", json={"id": f["id"], "type": "disk"}).status_code == 400
    assert logged_client.post("/api/shares", json={"id": f["id"], "type": "file",
                                                   "permission": "owner"}).status_code == 400
    assert logged_client.post("/api/shares", json={"id": 999, "type": "file"}).status_code == 404

    other = app.test_client()
    other.post("/api/register", json={"username": "mallory", "password": "secret123"})
    assert other.post("/api/shares", json={"id": f["id"], "type": "file"}).status_code == 403
    share = logged_client.post("/api/shares", json={"id": f["id"], "type": "file"}).get_json()
    assert other.delete(f"/api/shares/{share['id']}").status_code == 403
