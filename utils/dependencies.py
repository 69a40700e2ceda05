from fastapi import HTTPException, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from fastapi.requests import Request
import structlog

from config import Settings
from services.prediction_service import PredictionService
from services.weather_service import WeatherService

logger = structlog.get_logger(__name__)

# --- Security Dependencies ---
security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def verify_api_key(request: Request,
                         credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Verify API key for protected endpoints"""
    api_key = get_settings(request).api_key
    if not api_key:
        return True  # No API key required in development

    if not credentials or credentials.credentials != api_key:
        logger.warning("Rejected request with invalid API key", path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return True


# --- Service Dependencies ---
def get_prediction_service(request: Request) -> PredictionService:
    return request.app.state.prediction_service


def get_weather_service(request: Request) -> WeatherService:
    return request.app.state.weather_service
