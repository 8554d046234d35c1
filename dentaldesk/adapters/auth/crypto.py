from datetime import timedelta
from typing import Any

from dentaldesk.api.auth_utils import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


class JWTAuthAdapter:
    """Auth adapter that uses JWT tokens and passlib for password hashing."""

    def __init__(self, secret_key: str | None = None) -> None:
        self._secret_key = secret_key

    def hash_password(self, password: str) -> str:
        return get_password_hash(password)

    def verify_password(self, plain: str, hashed: str) -> bool:
        try:
            return verify_password(plain, hashed)
        except ValueError:
            # not a hash passlib recognises
            return False

    def create_token(self, claims: dict[str, Any], ttl_minutes: int) -> str:
        return create_access_token(
            claims, timedelta(minutes=ttl_minutes), secret_key=self._secret_key
        )

    def validate_token(self, token: str) -> dict[str, Any] | None:
        return decode_access_token(token, secret_key=self._secret_key)
