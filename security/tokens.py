"""
Access / refresh token issuance.

Access tokens are signed with one process-wide secret and verify without
touching the database. Refresh tokens are signed with the secret stored on
their session row, so deleting the session revokes them. The session id
rides in the refresh token's ``kid`` header so the verifier knows which
secret to load. Payloads are signed, not encrypted.
"""
import secrets
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from errors import AppMessage, AuthenticationError, ConfigError

ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str

    def to_dict(self) -> dict:
        return {"accessToken": self.access_token, "refreshToken": self.refresh_token}


class TokenIssuer:
    def __init__(self, access_secret: str, access_ttl_seconds: int, refresh_ttl_seconds: int, secret_rounds: int = 10):
        if not isinstance(access_secret, str) or not access_secret.strip():
            raise ConfigError(AppMessage.ACCESS_SECRET_MISSING)
        self._access_secret = access_secret
        self._access_ttl = timedelta(seconds=access_ttl_seconds)
        self._refresh_ttl = timedelta(seconds=refresh_ttl_seconds)
        self._secret_rounds = secret_rounds

    def generate_refresh_secret(self, subscriber_id: str) -> str:
        """Fresh salted hash; the random salt keeps it unique per session."""
        seed = f"{subscriber_id}-{time.time_ns()}-{secrets.token_hex(8)}"
        return bcrypt.hashpw(seed.encode("utf-8"), bcrypt.gensalt(rounds=self._secret_rounds)).decode("utf-8")

    def issue(self, subscriber_id: str, session_id: str, refresh_secret: str) -> TokenPair:
        now = datetime.now(timezone.utc)
        access_token = jwt.encode(
            {
                "subscriber": subscriber_id,
                "session_id": session_id,
                "iat": now,
                "exp": now + self._access_ttl,
            },
            self._access_secret,
            algorithm=ALGORITHM,
        )
        refresh_token = jwt.encode(
            {"subscriber": subscriber_id, "iat": now, "exp": now + self._refresh_ttl},
            refresh_secret,
            algorithm=ALGORITHM,
            headers={"kid": session_id},
        )
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def decode_access_token(self, token: str) -> dict:
        try:
            claims = jwt.decode(
                token,
                self._access_secret,
                algorithms=[ALGORITHM],
                options={"require": ["subscriber", "session_id", "exp"]},
            )
        except jwt.InvalidTokenError:
            raise AuthenticationError(AppMessage.INVALID_TOKEN)
        return claims

    def read_refresh_session_id(self, token: str) -> str:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError:
            raise AuthenticationError(AppMessage.INVALID_REFRESH_TOKEN)
        session_id = header.get("kid")
        if not isinstance(session_id, str) or not session_id:
            raise AuthenticationError(AppMessage.INVALID_REFRESH_TOKEN)
        return session_id

    def decode_refresh_token(self, token: str, refresh_secret: str) -> dict:
        try:
            return jwt.decode(
                token,
                refresh_secret,
                algorithms=[ALGORITHM],
                options={"require": ["subscriber", "exp"]},
            )
        except jwt.InvalidTokenError:
            raise AuthenticationError(AppMessage.INVALID_REFRESH_TOKEN)
