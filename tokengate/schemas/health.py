"""Health report for the service and the stores the auth flows depend on."""

from typing import Literal

from pydantic import BaseModel, Field

StoreStatus = Literal["connected", "disconnected"]


class HealthResponse(BaseModel):
    """
    Response body for GET /health.

    status is "degraded" when either the credential store or the revocation
    registry is unreachable; protected routes fail closed in that state.
    """

    status: Literal["ok", "degraded"]
    environment: str
    credential_store: StoreStatus = Field(description="Users table reachability")
    revocation_backend: Literal["database", "memory"]
    revocation_registry: StoreStatus = Field(description="Revocation registry reachability")
