"""Register, login, logout and the bearer-token dependency guarding protected routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from tokengate.core.database import get_db
from tokengate.schemas.auth import (
    LoginData,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from tokengate.services.credential_store import SqlCredentialStore
from tokengate.services.gateway import AuthenticatedRequest, AuthGateway

router = APIRouter()


def get_gateway(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> AuthGateway:
    """Dependency: gateway bound to this request's DB session and the app-wide components."""
    state = request.app.state
    return AuthGateway(
        store=SqlCredentialStore(db),
        hasher=state.password_hasher,
        tokens=state.token_issuer,
        registry=state.revocation_registry,
    )


def require_token(
    request: Request,
    gateway: Annotated[AuthGateway, Depends(get_gateway)],
    authorization: Annotated[str | None, Header()] = None,
) -> AuthenticatedRequest:
    """
    Dependency: require an unrevoked, valid Bearer token.
    Raises 401 for a missing/malformed header, a revoked token or an invalid one.
    The verified claims are also attached as request.state.user.
    """
    auth = gateway.authenticate(authorization)
    request.state.user = auth.claims
    return auth


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    body: RegisterRequest,
    gateway: Annotated[AuthGateway, Depends(get_gateway)],
) -> RegisterResponse:
    """Create an account. Usernames are unique regardless of case."""
    user_id = gateway.register(body.username, body.password, body.email)
    return RegisterResponse(message="Saved Successfully", result=True, data=user_id)


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    gateway: Annotated[AuthGateway, Depends(get_gateway)],
) -> LoginResponse:
    """
    Authenticate with username and password; returns a JWT valid for one hour.
    Include the token in the Authorization header as: Bearer <token>
    """
    token = gateway.login(body.username, body.password)
    return LoginResponse(message="Login Success", result=True, data=LoginData(token=token))


@router.get("/protected", response_class=PlainTextResponse)
def protected(
    _auth: Annotated[AuthenticatedRequest, Depends(require_token)],
) -> str:
    return "This is a protected route"


@router.post("/logout", response_class=PlainTextResponse)
def logout(
    auth: Annotated[AuthenticatedRequest, Depends(require_token)],
    gateway: Annotated[AuthGateway, Depends(get_gateway)],
) -> str:
    """Revoke the presented token; later requests with it get 401."""
    gateway.logout(auth)
    return "Logged out successfully"
