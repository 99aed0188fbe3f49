import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from jose import jwt, JWTError as JoseJWTError

from common.logging.logger import log_debug
from .errors import InvalidTokenError, TokenConfigurationError

ACCESS_CLAIMS = ("id", "role", "first_name", "last_name")


@dataclass(frozen=True)
class SessionTokens:
    access_token: str
    refresh_token: str


def generate_refresh_token() -> str:
    """Opaque refresh material: a random UUID and 64 random bytes, dot separated."""
    return f"{uuid4()}.{secrets.token_hex(64)}"


def hash_refresh_token(refresh_token: str) -> str:
    """SHA-256 digest stored instead of the plaintext refresh token."""
    return hashlib.sha256(refresh_token.encode("utf-8")).hexdigest()


def refresh_token_matches(refresh_token: str, stored_hash: str) -> bool:
    if not refresh_token or not stored_hash:
        return False
    return hmac.compare_digest(hash_refresh_token(refresh_token), stored_hash)


class TokenService:
    """Signs and verifies admin access tokens. Holds no state beyond its key."""

    def __init__(self, secret: Optional[str], algorithm: str = "HS256", access_ttl_seconds: int = 3600):
        if not secret:
            raise TokenConfigurationError()
        self._secret = secret
        self._algorithm = algorithm
        self._access_ttl = timedelta(seconds=access_ttl_seconds)

    def _build_claims(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        claims = {key: payload.get(key) for key in ACCESS_CLAIMS}
        claims["id"] = str(claims["id"]) if claims["id"] is not None else None
        claims["iat"] = int(now.timestamp())
        claims["exp"] = int((now + self._access_ttl).timestamp())
        return claims

    def issue_access_token(self, payload: Dict[str, Any]) -> str:
        claims = self._build_claims(payload)
        token = jwt.encode(claims, self._secret, algorithm=self._algorithm)
        log_debug("Access token issued", extra={"admin_id": claims["id"], "exp": claims["exp"]})
        return token

    def issue_session_tokens(self, payload: Dict[str, Any]) -> SessionTokens:
        return SessionTokens(
            access_token=self.issue_access_token(payload),
            refresh_token=generate_refresh_token(),
        )

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        """
        Decode an access token.

        Raises:
            InvalidTokenError: for every failure. Callers treat it as "needs refresh".
        """
        if not token:
            raise InvalidTokenError()
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JoseJWTError as e:
            log_debug("Access token rejected", extra={"error": str(e)})
            raise InvalidTokenError() from e
