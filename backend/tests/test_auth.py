# ruff: noqa

from datetime import timedelta
from uuid import uuid4

from jose import jwt

from app.core.auth import _bearer_token, create_access_token, decode_access_token
from app.core.config import settings


def test_token_round_trip_returns_user_id():
    user_id = uuid4()
    assert decode_access_token(create_access_token(user_id)) == user_id


def test_expired_token_is_rejected():
    token = create_access_token(uuid4(), expires_in=timedelta(seconds=-30))
    assert decode_access_token(token) is None


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode({"sub": str(uuid4())}, "not-the-secret", algorithm=settings.jwt_algorithm)
    assert decode_access_token(token) is None


def test_non_uuid_subject_is_rejected():
    token = jwt.encode({"sub": "alice"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    assert decode_access_token(token) is None


def test_bearer_header_parsing():
    assert _bearer_token("Bearer abc") == "abc"
    assert _bearer_token("bearer  abc ") == "abc"
    assert _bearer_token("Basic abc") is None
    assert _bearer_token("Bearer ") is None
    assert _bearer_token(None) is None
