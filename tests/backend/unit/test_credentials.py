"""
Unit tests for services.credentials against a real in-memory database.
"""
import pytest
from sqlalchemy import func, select

from app.core.errors import AuthError, ConflictError, ValidationError
from app.models.user import User
from app.services import credentials


pytestmark = pytest.mark.asyncio


async def _count(session) -> int:
    return (await session.execute(select(func.count()).select_from(User))).scalar_one()


async def test_register_stores_hash_not_password(session):
    user = await credentials.register(session, "alice", "secret123")
    assert isinstance(user.id, int)
    assert user.username == "alice"
    assert user.password_hash != "secret123"
    assert user.password_hash.startswith("$2")
    assert user.to_public() == {"id": user.id, "username": "alice"}


@pytest.mark.parametrize(
    "username,password",
    [(None, "secret123"), ("alice", None), ("", "secret123"), ("alice", ""), (None, None)],
)
async def test_register_requires_both_fields(session, username, password):
    with pytest.raises(ValidationError) as exc:
        await credentials.register(session, username, password)
    assert exc.value.status_code == 400
    assert exc.value.message == "Username and password are required"
    assert await _count(session) == 0


async def test_register_duplicate_is_conflict(session):
    await credentials.register(session, "alice", "secret123")
    with pytest.raises(ConflictError) as exc:
        await credentials.register(session, "alice", "other-password")
    assert exc.value.status_code == 400
    assert exc.value.message == "Username already exists"
    assert await _count(session) == 1


async def test_register_race_lost_at_unique_constraint(session, monkeypatch):
    """When the pre-check misses a concurrent insert, the UNIQUE constraint still wins."""
    await credentials.register(session, "alice", "secret123")

    async def _no_user(_session, _username):
        return None

    monkeypatch.setattr(credentials, "get_user_by_username", _no_user)
    with pytest.raises(ConflictError):
        await credentials.register(session, "alice", "secret123")
    monkeypatch.undo()
    assert await _count(session) == 1


async def test_ids_increase(session):
    first = await credentials.register(session, "first", "pw-1")
    second = await credentials.register(session, "second", "pw-2")
    assert second.id > first.id


async def test_verify_success(session):
    registered = await credentials.register(session, "alice", "secret123")
    user = await credentials.verify(session, "alice", "secret123")
    assert user.id == registered.id


async def test_verify_failures_are_identical(session):
    await credentials.register(session, "alice", "secret123")
    with pytest.raises(AuthError) as wrong_password:
        await credentials.verify(session, "alice", "wrong")
    with pytest.raises(AuthError) as unknown_user:
        await credentials.verify(session, "nobody", "secret123")
    assert wrong_password.value.message == unknown_user.value.message == "Invalid username or password"
    assert wrong_password.value.status_code == unknown_user.value.status_code == 401


async def test_verify_requires_both_fields(session):
    with pytest.raises(ValidationError):
        await credentials.verify(session, "alice", "")


async def test_list_users_ordered_without_hashes(session):
    await credentials.register(session, "zed", "pw-z")
    await credentials.register(session, "amy", "pw-a")
    users = await credentials.list_users(session)
    assert [u["username"] for u in users] == ["zed", "amy"]
    assert all(set(u) == {"id", "username"} for u in users)


async def test_list_users_empty(session):
    assert await credentials.list_users(session) == []


@pytest.mark.parametrize(
    "password,message",
    [
        ("abc\x00def", "Password contains unsupported characters"),
        ("a" * 73, "Password must be at most 72 bytes"),
    ],
)
async def test_register_rejects_passwords_bcrypt_cannot_store(session, password, message):
    with pytest.raises(ValidationError) as exc:
        await credentials.register(session, "nul", password)
    assert exc.value.status_code == 400
    assert exc.value.message == message
    assert await _count(session) == 0


async def test_verify_nul_password_is_auth_error(session):
    await credentials.register(session, "alice", "abcdef")
    with pytest.raises(AuthError):
        await credentials.verify(session, "alice", "abc\x00def")
