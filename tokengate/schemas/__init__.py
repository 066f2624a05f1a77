"""Pydantic request/response schemas."""

from tokengate.schemas.auth import (
    ApiResponse,
    LoginData,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    TokenClaims,
)
from tokengate.schemas.health import HealthResponse

__all__ = [
    "ApiResponse",
    "HealthResponse",
    "LoginData",
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    "TokenClaims",
]
