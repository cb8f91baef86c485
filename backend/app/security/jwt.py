# backend/app/security/jwt.py
"""
Signed session (access) tokens.

Tokens are HS256 JWTs carrying the account id in `sub` plus `iat`/`exp`.
Verification is local: signature + expiry + typed claims, no DB lookup.
Only HS256 is accepted; a token whose header names any other algorithm
(including "none") is rejected before signature checking.
"""
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from backend.app.core.errors import InvalidOrExpiredTokenError

ALGORITHM = "HS256"


class AccessTokenClaims(BaseModel):
    sub: int
    iat: int
    exp: int


class AccessTokenCodec:
    def __init__(self, secret_key: str):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key

    def issue(self, account_id: int, ttl_seconds: int) -> str:
        now = datetime.now(timezone.utc)
        expire = now + timedelta(seconds=ttl_seconds)
        to_encode = {
            # jose requires `sub` to be a string
            "sub": str(account_id),
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=ALGORITHM)

    def decode(self, token: str) -> AccessTokenClaims:
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") != ALGORITHM:
                raise InvalidOrExpiredTokenError()
            payload = jwt.decode(token, self._secret_key, algorithms=[ALGORITHM])
            return AccessTokenClaims(**payload)
        except (JWTError, ValidationError, TypeError) as ex:
            raise InvalidOrExpiredTokenError() from ex

    def verify(self, token: str) -> int:
        """Return the account id carried by a valid token."""
        return self.decode(token).sub
