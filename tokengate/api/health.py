"""Health check covering the credential store and the revocation registry."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from tokengate.core.database import check_table_reachable, get_db
from tokengate.models import User
from tokengate.schemas.health import HealthResponse
from tokengate.services.revocation import InMemoryRevocationRegistry

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> HealthResponse:
    """
    Report whether the users table and the revocation registry are reachable.
    Always 200; callers read status.
    """
    registry = request.app.state.revocation_registry
    store_ok = check_table_reachable(db, User)
    registry_ok = registry.ping()

    return HealthResponse(
        status="ok" if store_ok and registry_ok else "degraded",
        environment=request.app.state.settings.APP_ENV,
        credential_store="connected" if store_ok else "disconnected",
        revocation_backend="memory" if isinstance(registry, InMemoryRevocationRegistry) else "database",
        revocation_registry="connected" if registry_ok else "disconnected",
    )
