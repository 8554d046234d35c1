from datetime import UTC, datetime, timedelta

from dentaldesk.adapters.auth.crypto import JWTAuthAdapter
from dentaldesk.api.auth_utils import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = get_password_hash("s3cret")
    assert hashed != "s3cret"
    assert hashed.startswith("$argon2")
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)


def test_token_carries_claims():
    token = create_access_token({"sub": "super_admin"}, secret_key="k1")
    payload = decode_access_token(token, secret_key="k1")
    assert payload is not None
    assert payload["sub"] == "super_admin"
    assert payload["exp"] > payload["iat"]


def test_token_wrong_key_rejected():
    token = create_access_token({"sub": "super_admin"}, secret_key="k1")
    assert decode_access_token(token, secret_key="k2") is None


def test_expired_token_rejected():
    issued = datetime.now(UTC) - timedelta(hours=2)
    token = create_access_token(
        {"sub": "super_admin"},
        expires_delta=timedelta(minutes=5),
        now_utc=issued,
        secret_key="k1",
    )
    assert decode_access_token(token, secret_key="k1") is None


def test_garbage_token_rejected():
    assert decode_access_token("not-a-jwt", secret_key="k1") is None


class TestJWTAuthAdapter:
    def test_create_and_validate(self):
        adapter = JWTAuthAdapter(secret_key="adapter-key")
        token = adapter.create_token({"role": "super_admin"}, ttl_minutes=10)
        claims = adapter.validate_token(token)
        assert claims is not None
        assert claims["role"] == "super_admin"

    def test_other_key_cannot_validate(self):
        token = JWTAuthAdapter(secret_key="a").create_token({"role": "x"}, ttl_minutes=10)
        assert JWTAuthAdapter(secret_key="b").validate_token(token) is None

    def test_verify_password_with_non_hash(self):
        adapter = JWTAuthAdapter(secret_key="k")
        assert adapter.verify_password("pw", adapter.hash_password("pw"))
        assert adapter.verify_password("pw", "plain-text-not-a-hash") is False
