"""Session token signing and verification."""

from datetime import datetime, timedelta, timezone

import jwt as pyjwt
import pytest

from gatehouse.auth.jwt import TokenCodec
from gatehouse.errors import InvalidToken
from tests.helpers import TEST_SECRET

codec = TokenCodec(TEST_SECRET)


def test_sign_and_verify():
    token = codec.sign("user-123")
    claims = codec.verify(token)
    assert claims.subject_id == "user-123"
    assert claims.expires_at > datetime.now(timezone.utc)


def test_token_has_three_segments():
    token = codec.sign("user-123")
    assert len(token.split(".")) == 3


def test_default_expiry_is_24_hours():
    before = datetime.now(timezone.utc)
    claims = codec.verify(codec.sign("user-123"))
    delta = claims.expires_at - before
    assert timedelta(hours=23, minutes=59) < delta <= timedelta(hours=24, seconds=1)


def test_expired_token_rejected():
    token = codec.sign(
        "user-123", expires_at=datetime.now(timezone.utc) - timedelta(seconds=1)
    )
    with pytest.raises(InvalidToken):
        codec.verify(token)


def test_token_from_other_secret_rejected():
    other = TokenCodec("some-other-secret-with-enough-bytes")
    with pytest.raises(InvalidToken):
        codec.verify(other.sign("user-123"))


def test_tampered_payload_rejected():
    header, _, signature = codec.sign("user-123").split(".")
    forged_payload = codec.sign("user-456").split(".")[1]
    with pytest.raises(InvalidToken):
        codec.verify(f"{header}.{forged_payload}.{signature}")


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "a.b"])
def test_malformed_token_rejected(token):
    with pytest.raises(InvalidToken):
        codec.verify(token)


def test_missing_subject_rejected():
    token = pyjwt.encode(
        {"exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        TEST_SECRET,
        algorithm="HS256",
    )
    with pytest.raises(InvalidToken):
        codec.verify(token)


def test_missing_expiry_rejected():
    token = pyjwt.encode({"sub": "user-123"}, TEST_SECRET, algorithm="HS256")
    with pytest.raises(InvalidToken):
        codec.verify(token)


def test_unsigned_token_rejected():
    token = pyjwt.encode(
        {"sub": "user-123", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        None,
        algorithm="none",
    )
    with pytest.raises(InvalidToken):
        codec.verify(token)


def test_errors_share_one_message():
    expired = codec.sign(
        "user-123", expires_at=datetime.now(timezone.utc) - timedelta(seconds=1)
    )
    messages = set()
    for token in (expired, "garbage"):
        with pytest.raises(InvalidToken) as exc:
            codec.verify(token)
        messages.add(exc.value.message)
    assert len(messages) == 1


def test_empty_secret_refused():
    with pytest.raises(ValueError):
        TokenCodec("")
