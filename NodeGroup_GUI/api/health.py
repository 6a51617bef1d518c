"""Health check route."""

from fastapi import APIRouter

from NodeGroup_GUI.schemas import HealthResponse
from NodeGroup_GUI.version import APP_VERSION

router = APIRouter()


@router.get("/api/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", version=APP_VERSION)
