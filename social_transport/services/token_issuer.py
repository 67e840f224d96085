"""
Signed bearer tokens.

Tokens are HS256 JWTs bound to one account id. There is no server-side
token store: a token is valid while its signature and expiry check out, and
the caller re-checks the bound account on every use.
"""
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from social_transport.errors import AuthError
from social_transport.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(hours=24)
TOKEN_TYPE = "access"


@dataclass
class TokenPayload:
    """
    Decoded token claims.

    Attributes:
        account_id: id of the bound account
        issued_at: issuance time (UTC)
        expires_at: expiry time (UTC)
        jti: unique token id
    """
    account_id: str
    issued_at: datetime
    expires_at: datetime
    jti: str


class TokenIssuer:
    """Issues and decodes access tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = DEFAULT_ALGORITHM,
        ttl: timedelta = DEFAULT_TTL,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            secret_key: HMAC signing key
            algorithm: JWT algorithm (default: HS256)
            ttl: token lifetime (default: 24 hours)
            clock: returns the current UTC time, overridable in tests
        """
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def issue(self, account_id: str) -> str:
        """
        Create a signed token for ``account_id``.

        Returns:
            JWT token string
        """
        now = self._clock()
        expire = now + self.ttl
        payload = {
            "sub": account_id,
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
            "jti": secrets.token_urlsafe(16),
            "type": TOKEN_TYPE,
        }
        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.debug(f"Access token issued for account {account_id}")
        return token

    def decode(self, token: str) -> TokenPayload:
        """
        Validate signature and expiry.

        Raises:
            AuthError: token malformed, forged or expired
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise AuthError("token expired")
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected invalid token: {e}")
            raise AuthError("invalid token")

        if payload.get("type") != TOKEN_TYPE:
            raise AuthError("invalid token")

        return TokenPayload(
            account_id=str(payload["sub"]),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            jti=payload.get("jti", ""),
        )
