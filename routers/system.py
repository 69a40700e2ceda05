from fastapi import APIRouter, Request
from datetime import datetime
import time
import structlog

logger = structlog.get_logger(__name__)

router = APIRouter(
    tags=["System & Monitoring"]
)


@router.get("/health", summary="Service health check", tags=["Monitoring"])
def health_check(request: Request):
    """Service status with storage and feed details"""
    state = request.app.state
    settings = state.settings
    service = state.prediction_service

    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": settings.api_version,
        "uptime_seconds": round(time.time() - state.start_time, 2),
        "services": {
            "dataset_store": {
                "status": "healthy",
                "backend": type(service.store).__name__,
                "datasets": len(service.list_datasets()),
            },
            "prediction_history": {
                "status": "healthy",
                "entries": len(service.history),
                "limit": service.history.limit,
            },
            "weather_feed": {
                "status": "healthy",
                "mode": "api" if state.weather_service.api_key_configured else "demo",
            },
        },
    }
