from datetime import datetime, timedelta, timezone

import pytest

from fantasycricket.accounts import AccountService, hash_password, verify_password
from fantasycricket.errors import AuthenticationError, ValidationError
from fantasycricket.persistence import FantasyStore


@pytest.fixture()
def accounts(tmp_path) -> AccountService:
    return AccountService(FantasyStore(tmp_path / "league.sqlite"))


def test_password_hash_round_trip():
    stored = hash_password("secret123")

    assert "." in stored
    assert verify_password("secret123", stored)
    assert not verify_password("wrong", stored)
    assert not verify_password("secret123", "not-a-hash")


def test_register_login_resolve_logout(accounts):
    user = accounts.register(username="asha", password="secret123", name="", email="Asha@Example.com")

    assert user.name == "asha"
    assert user.email == "asha@example.com"
    assert not user.is_admin

    logged_in, token = accounts.login("asha", "secret123")
    assert logged_in.id == user.id
    assert accounts.resolve(token).id == user.id

    accounts.logout(token)
    with pytest.raises(AuthenticationError):
        accounts.resolve(token)


@pytest.mark.parametrize(
    ("username", "password", "email"),
    [("asha", "short", "asha@example.com"), ("asha", "secret123", "not-an-email"), (" ", "secret123", "a@b.co")],
)
def test_register_validation(accounts, username, password, email):
    with pytest.raises(ValidationError):
        accounts.register(username=username, password=password, name="Asha", email=email)


def test_register_duplicate_username(accounts):
    accounts.register(username="asha", password="secret123", name="Asha", email="asha@example.com")

    with pytest.raises(ValidationError):
        accounts.register(username="asha", password="secret123", name="Asha", email="other@example.com")


def test_login_failures(accounts):
    accounts.register(username="asha", password="secret123", name="Asha", email="asha@example.com")

    with pytest.raises(AuthenticationError):
        accounts.login("asha", "wrong-password")
    with pytest.raises(AuthenticationError):
        accounts.login("nobody", "secret123")
    with pytest.raises(AuthenticationError):
        accounts.resolve(None)


def test_expired_session_is_rejected(accounts):
    user = accounts.register(username="asha", password="secret123", name="Asha", email="asha@example.com")
    token = accounts.store.create_session(user.id, expires_at=datetime.now(timezone.utc) - timedelta(minutes=1))

    with pytest.raises(AuthenticationError):
        accounts.resolve(token)


def test_ensure_admin_creates_then_promotes(accounts):
    admin = accounts.ensure_admin("admin", "admin123")
    assert admin.is_admin
    assert accounts.ensure_admin("admin", "ignored").id == admin.id

    user = accounts.register(username="asha", password="secret123", name="Asha", email="asha@example.com")
    assert accounts.ensure_admin("asha", "unused").is_admin
    assert accounts.login("asha", "secret123")[0].id == user.id
