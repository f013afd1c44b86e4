"""Health check endpoint. No dependencies and never audited; used for liveness probes."""

from fastapi import APIRouter

from schoolhub.core.config import get_settings
from schoolhub.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    return HealthResponse(version=get_settings().app_version)
