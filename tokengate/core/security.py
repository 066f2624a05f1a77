"""Password hashing and JWT creation/verification for authentication."""

import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from tokengate.schemas.auth import TokenClaims
from tokengate.services.exceptions import InvalidTokenError, TokenExpiredError

# Bcrypt cost (rounds); 10 keeps login latency low while staying expensive to brute-force.
BCRYPT_ROUNDS = 10

# bcrypt only reads the first 72 bytes of input.
BCRYPT_MAX_BYTES = 72

DEFAULT_TOKEN_TTL = timedelta(hours=1)

# Claims a token must carry to be accepted.
REQUIRED_CLAIMS = ["sub", "role", "exp"]


def _to_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Salted bcrypt hashing with a fixed cost factor."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS) -> None:
        self.rounds = rounds
        # Verified against when the username does not exist, so unknown users
        # cost the same bcrypt work as a wrong password.
        self._dummy_hash = self.hash("tokengate-timing-dummy")

    def hash(self, plain_password: str) -> str:
        """Hash a plain-text password for storage. Each call uses a fresh salt."""
        return bcrypt.hashpw(
            _to_bytes(plain_password), bcrypt.gensalt(rounds=self.rounds)
        ).decode("utf-8")

    def verify(self, plain_password: str, hashed: str) -> bool:
        """Verify a plain password against a stored hash. False on a malformed hash."""
        try:
            return bcrypt.checkpw(_to_bytes(plain_password), hashed.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            return False

    def verify_dummy(self, plain_password: str) -> None:
        self.verify(plain_password, self._dummy_hash)


class TokenIssuer:
    """
    Issues and verifies signed access tokens.

    The secret is handed in once at startup; verification checks signature,
    expiry and required claims but never revocation.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not secret:
            raise ValueError("Token signing secret must be non-empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl
        self._clock = clock or (lambda: datetime.now(UTC))

    def issue(self, user_id: str | int, role: str) -> str:
        """Create a JWT with sub (user id), role, iat, exp and a random jti."""
        now = self._clock()
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "role": role,
            "iat": now,
            "exp": now + self.ttl,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and validate a JWT; return its claims.
        Raises TokenExpiredError when exp has passed and InvalidTokenError for
        a bad signature, a malformed token or missing claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except jwt.PyJWTError as e:
            raise InvalidTokenError() from e
        try:
            return TokenClaims.model_validate(payload)
        except ValueError as e:
            raise InvalidTokenError() from e
