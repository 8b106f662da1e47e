"""Authentication service - issues and verifies auth tokens."""
import time
from typing import Any, Dict, Optional

import jwt

from ... import config


class AuthService:
    """Service for auth token operations.

    Tokens are HS256 JWTs with ``userId``, ``iat`` and ``exp`` claims, carried
    in the auth cookie.

    Examples:
        >>> service = AuthService()
        >>> token = service.generate_token("user-id")
        >>> service.decode_token(token)["userId"]
        'user-id'
    """

    def __init__(
        self,
        secret: str = None,
        ttl: int = None,
        refresh_ttl: int = None
    ):
        self.secret = secret or config.JWT_SECRET
        self.ttl = ttl if ttl is not None else config.JWT_TTL
        self.refresh_ttl = refresh_ttl if refresh_ttl is not None else config.JWT_REFRESH_TTL

    def generate_token(self, user_id: str, issued_at: Optional[int] = None) -> str:
        """Create a signed token for a user.

        Args:
            user_id: User ID
            issued_at: Unix time to use as ``iat`` (defaults to now)

        Returns:
            Encoded JWT
        """
        iat = int(time.time()) if issued_at is None else issued_at
        payload = {"userId": user_id, "iat": iat, "exp": iat + self.ttl}
        return jwt.encode(payload, self.secret, algorithm=config.JWT_ALGORITHM)

    def decode_token(self, token: str) -> Dict[str, Any]:
        """Verify and decode a token.

        Raises:
            jwt.ExpiredSignatureError: Token is correctly signed but expired
            jwt.PyJWTError: Token is invalid
        """
        return jwt.decode(token, self.secret, algorithms=[config.JWT_ALGORITHM])

    def decode_expired_token(self, token: str) -> Dict[str, Any]:
        """Decode a token checking the signature but not the expiry."""
        return jwt.decode(
            token,
            self.secret,
            algorithms=[config.JWT_ALGORITHM],
            options={"verify_exp": False}
        )

    def can_refresh(self, payload: Dict[str, Any]) -> bool:
        """Whether an expired token is still young enough to be renewed."""
        issued_at = payload.get("iat")
        if issued_at is None:
            return False
        return int(time.time()) - int(issued_at) <= self.refresh_ttl
