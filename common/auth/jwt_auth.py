"""
JWT token signing and verification.

Access and refresh tokens are both HS256 JWTs signed with the same key and
carrying the same identity claims; they differ only in lifetime.

Example:
    auth = JWTAuth(secret="your-secret-key", access_token_expire_minutes=60)

    token = auth.create_token({"username": "alice", "email": "a@x.com", "role": "Regular"})
    claims = auth.decode_token(token)
    print(claims["username"])
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional

from jose import jwt, ExpiredSignatureError, JWTError


class TokenExpiredError(ValueError):
    """The token signature is valid but its ``exp`` claim has passed."""


class JWTAuth:
    """
    JWT signing/verification helper.

    Holds no user storage; identity claims are supplied by the caller.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 60,
    ):
        """
        Initialize JWT auth helper.

        Args:
            secret: Secret key for JWT signing (keep this secure!)
            algorithm: JWT algorithm (default: HS256)
            access_token_expire_minutes: Lifetime of freshly minted access tokens
        """
        self.secret = secret
        self.algorithm = algorithm
        self.access_token_expire = timedelta(minutes=access_token_expire_minutes)

    def create_token(
        self,
        claims: Dict[str, Any],
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """Create a signed JWT carrying ``claims``."""
        now = datetime.now(timezone.utc)
        payload = {
            **claims,
            "iat": now,
            "exp": now + (expires_delta or self.access_token_expire),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT.

        Raises:
            TokenExpiredError: Signature valid but token expired
            ValueError: Token malformed or signature invalid
        """
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise TokenExpiredError(f"Token expired: {e}")
        except JWTError as e:
            raise ValueError(f"Invalid token: {e}")
