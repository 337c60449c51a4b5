# tests/conftest.py
# -*- coding: utf-8 -*-
import os
import sys
import uuid
import pathlib

import pytest
from sqlalchemy import event


# =====================================================================================
# Project location (makes sure "cloudbox_app" and "config" are importable)
# =====================================================================================
def _add_project_root():
    here = pathlib.Path(__file__).resolve()
    for candidate in [here.parent, *here.parents]:
        if (candidate / "cloudbox_app").is_dir():
            if str(candidate) not in sys.path:
                sys.path.insert(0, str(candidate))
            return candidate
    return None


PROJECT_ROOT = _add_project_root()


# =====================================================================================
# Test environment (no external services)
# =====================================================================================
@pytest.fixture(autouse=True, scope="session")
def _testing_env():
    os.environ["APP_ENV"] = "testing"
    os.environ["FLASK_ENV"] = "testing"
    os.environ["DISABLE_SCHEDULER"] = "1"
    os.environ.setdefault("SECRET_KEY", "testing-secret")
    yield


def _enable_sqlite_fks(dbapi_conn, _conn_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# =====================================================================================
# Flask app on a temporary SQLite database and upload folder, one per test
# =====================================================================================
@pytest.fixture
def app(tmp_path):
    from config import TestingConfig
    from cloudbox_app import create_app
    from cloudbox_app.extensions import db

    app = create_app(TestingConfig, {
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'cloudbox_test.sqlite'}",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "DEFAULT_STORAGE_LIMIT": 1000,
        "MAX_FILE_SIZE": 500,
    })

    with app.app_context():
        event.listen(db.engine, "connect", _enable_sqlite_fks)
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db_session(ctx):
    from cloudbox_app.extensions import db
    try:
        yield db.session
    finally:
        db.session.rollback()


# =====================================================================================
# Users and logged-in clients
# =====================================================================================
def make_user(storage_limit=1000, password="secret123"):
    from cloudbox_app.services.accounts import create_user
    return create_user(f"user_{uuid.uuid4().hex[:8]}", password, storage_limit=storage_limit)


@pytest.fixture
def user(ctx):
    return make_user()


@pytest.fixture
def other_user(ctx):
    return make_user()


def upload(user_id, name="a.txt", size=100, mime="text/plain", folder_id=None):
    from cloudbox_app.services.lifecycle import upload_file
    return upload_file(user_id, filename=name, data=b"x" * size, mime_type=mime, folder_id=folder_id)


@pytest.fixture
def logged_client(app, client):
    with app.app_context():
        u = make_user()
        user_id, username = u.id, u.username
    with client.session_transaction() as sess:
        sess["user"] = {"id": user_id, "username": username}
    client.user_id = user_id
    return client
