"""Tests for token encoding and role checks."""

from datetime import timedelta

from jose import jwt

from videohub.core.config import settings
from videohub.core.security import Identity, create_access_token, decode_access_token
from videohub.models.user import UserRole


def test_token_round_trip():
    token = create_access_token(42, [UserRole.user, UserRole.admin])

    identity = decode_access_token(token)

    assert identity == Identity(id=42, roles=frozenset({UserRole.user, UserRole.admin}))
    assert identity.is_admin


def test_regular_user_is_not_admin():
    identity = decode_access_token(create_access_token(7))

    assert identity.has_role(UserRole.user)
    assert not identity.is_admin


def test_expired_token_is_rejected():
    token = create_access_token(7, expires_delta=timedelta(seconds=-5))

    assert decode_access_token(token) is None


def test_tampered_token_is_rejected():
    token = create_access_token(7)

    assert decode_access_token(token + "x") is None
    assert decode_access_token("not-a-token") is None


def test_unknown_roles_grant_nothing():
    token = jwt.encode(
        {"sub": "5", "roles": ["superuser", "admin"]},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )

    identity = decode_access_token(token)

    assert identity.roles == frozenset({UserRole.admin})


def test_missing_subject_is_rejected():
    token = jwt.encode({"roles": ["user"]}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    assert decode_access_token(token) is None
