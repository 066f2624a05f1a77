"""Request/response schemas for auth endpoints and token claims."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Body for POST /register."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")
    email: str = Field(..., min_length=1, max_length=320, description="Email")


class LoginRequest(BaseModel):
    """Credentials for login. Unbounded so any bad pair takes the same 400 path."""

    username: str = Field(..., description="Username")
    password: str = Field(..., description="Password")


class LoginData(BaseModel):
    token: str = Field(..., description="JWT access token")


class ApiResponse(BaseModel):
    """Envelope shared by JSON responses: {message, result, data}."""

    message: str
    result: bool
    data: Any = None


class RegisterResponse(ApiResponse):
    data: str = Field(..., description="Opaque id of the created user")


class LoginResponse(ApiResponse):
    data: LoginData


class TokenClaims(BaseModel):
    """Decoded claims of a verified access token."""

    model_config = ConfigDict(extra="ignore")

    sub: str
    role: str
    exp: datetime
    iat: datetime | None = None
    jti: str | None = None
