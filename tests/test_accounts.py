# tests/test_accounts.py
import pytest

from cloudbox_app.errors import ValidationFailedError
from cloudbox_app.services.accounts import authenticate, create_user


def test_create_user_defaults(ctx):
    u = create_user("  alice  ", "secret123", email="alice@example.com")
    assert u.username == "alice"
    assert u.storage_used == 0
    assert u.storage_limit == 1000
    assert u.password_hash != "secret123"


@pytest.mark.parametrize("username,password,limit", [
    ("al", "secret123", None),
    ("alice", "12345", None),
    ("alice", "secret123", 0),
])
def test_create_user_rejects(ctx, username, password, limit):
    with pytest.raises(ValidationFailedError):
        create_user(username, password, storage_limit=limit)


def test_duplicates_rejected(ctx):
    create_user("alice", "secret123", email="a@example.com")
    with pytest.raises(ValidationFailedError, match="Username"):
        create_user("alice", "secret123")
    with pytest.raises(ValidationFailedError, match="Email"):
        create_user("bob", "secret123", email="a@example.com")


def test_authenticate(ctx):
    create_user("alice", "secret123")
    assert authenticate("alice", "secret123").username == "alice"
    assert authenticate("alice", "wrong") is None
    assert authenticate("nobody", "secret123") is None
