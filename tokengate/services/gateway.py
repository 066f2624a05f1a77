"""
Auth gateway: register, login, protected access and logout flows.

Every flow ends either in a result or in an AuthError subclass with a fixed
public message. Store and registry failures become ServerError; the underlying
exception is logged, never returned.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from tokengate.core.security import PasswordHasher, TokenIssuer
from tokengate.schemas.auth import TokenClaims
from tokengate.services.credential_store import CredentialStore, fold_username
from tokengate.services.exceptions import (
    DuplicateUserError,
    InvalidCredentialsError,
    MissingTokenError,
    ServerError,
    TokenRevokedError,
)
from tokengate.services.revocation import RevocationRegistry

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AuthenticatedRequest:
    """The token a request authenticated with and its verified claims."""

    token: str
    claims: TokenClaims


def extract_bearer_token(authorization: str | None) -> str:
    """
    Return the token from an exact "Bearer <token>" header value.
    Raises MissingTokenError for a missing header, another scheme, or an empty token.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise MissingTokenError()
    token = authorization[len(BEARER_PREFIX):]
    if not token or any(ch.isspace() for ch in token):
        raise MissingTokenError()
    return token


class AuthGateway:
    """Orchestrates the credential store, hasher, token issuer and revocation registry."""

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        registry: RevocationRegistry,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.registry = registry

    def register(self, username: str, password: str, email: str) -> str:
        """Create a user and return its opaque id. Raises DuplicateUserError or ServerError."""
        username = fold_username(username)
        try:
            if self.store.find_by_username(username) is not None:
                raise DuplicateUserError()
            password_hash = self.hasher.hash(password)
            user = self.store.create(username, password_hash, email)
        except DuplicateUserError:
            logger.info("Registration rejected: username exists", extra={"username": username})
            raise
        except SQLAlchemyError as e:
            logger.exception("Registration failed: %s", type(e).__name__)
            raise ServerError() from e
        logger.info("User registered", extra={"user_id": user.id, "username": username})
        return str(user.id)

    def login(self, username: str, password: str) -> str:
        """
        Verify credentials and return a signed token.

        Unknown usernames and wrong passwords raise the same InvalidCredentialsError,
        and both pay for one bcrypt check.
        """
        username = fold_username(username)
        try:
            user = self.store.find_by_username(username)
        except SQLAlchemyError as e:
            logger.exception("Login lookup failed: %s", type(e).__name__)
            raise ServerError() from e
        if user is None:
            self.hasher.verify_dummy(password)
            logger.info("Login failed", extra={"username": username})
            raise InvalidCredentialsError()
        if not self.hasher.verify(password, user.password_hash):
            logger.info("Login failed", extra={"username": username})
            raise InvalidCredentialsError()
        token = self.tokens.issue(user.id, user.role)
        logger.info("Login succeeded", extra={"user_id": user.id})
        return token

    def authenticate(self, authorization: str | None) -> AuthenticatedRequest:
        """
        Protected-access check for a raw Authorization header value.

        Order: header format, then revocation, then signature and expiry.
        Raises MissingTokenError, TokenRevokedError, InvalidTokenError or ServerError.
        """
        token = extract_bearer_token(authorization)
        try:
            revoked = self.registry.contains(token)
        except SQLAlchemyError as e:
            logger.exception("Revocation lookup failed: %s", type(e).__name__)
            raise ServerError() from e
        if revoked:
            raise TokenRevokedError()
        claims = self.tokens.verify(token)
        return AuthenticatedRequest(token=token, claims=claims)

    def logout(self, auth: AuthenticatedRequest) -> None:
        """Revoke the token the request authenticated with, until its own expiry."""
        try:
            self.registry.add(auth.token, expires_at=auth.claims.exp)
        except SQLAlchemyError as e:
            logger.exception("Revocation write failed: %s", type(e).__name__)
            raise ServerError() from e
        logger.info("User logged out", extra={"user_id": auth.claims.sub})
