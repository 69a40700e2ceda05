# main.py - RiskCast API
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import logging
import sys
import time
import structlog
from datetime import datetime

from config import Settings, settings as default_settings
from middleware import setup_logging_middleware
from services.data_ingestion import DatasetIdSequence
from services.data_storage import InMemoryDatasetStore, JsonFileDatasetStore, PredictionHistory
from services.exceptions import RiskCastError
from services.prediction_engine import DatasetPredictionEngine
from services.prediction_service import PredictionService
from services.weather_service import WeatherService

# Import Routers
from routers import datasets, predictions, weather, system

# --- Structured Logging Setup ---
logging.basicConfig(
    format="%(message)s",
    stream=sys.stdout,
    level=getattr(logging, default_settings.log_level.upper(), logging.INFO),
)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
        if default_settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)


def build_services(app: FastAPI, config: Settings):
    """Create the stores and services and attach them to app.state"""
    if config.use_file_storage:
        store = JsonFileDatasetStore(config.data_dir, config.datasets_file)
        history = PredictionHistory(config.history_limit, Path(config.data_dir) / config.history_file)
    else:
        store = InMemoryDatasetStore()
        history = PredictionHistory(config.history_limit)

    weather_service = WeatherService(config)
    app.state.settings = config
    app.state.weather_service = weather_service
    app.state.prediction_service = PredictionService(
        store=store,
        history=history,
        engine=DatasetPredictionEngine(config),
        weather=weather_service,
        ids=DatasetIdSequence(),
        config=config,
    )


def create_app(config: Optional[Settings] = None) -> FastAPI:
    config = config or default_settings

    # --- Lifespan Event Handler ---
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan context manager"""
        logger.info("Starting RiskCast API", version=config.api_version)
        app.state.start_time = time.time()

        try:
            build_services(app, config)
            logger.info("Services initialized successfully",
                        file_storage=config.use_file_storage, data_dir=config.data_dir)
        except OSError as e:
            logger.error("Service initialization failed", error=str(e))
            raise RuntimeError("Service initialization failed") from e

        logger.info("Application startup completed")

        yield

        logger.info("Application shutdown completed")

    # --- App Setup ---
    app = FastAPI(
        title=config.api_title,
        description=config.api_description,
        version=config.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    # Setup logging middleware
    app = setup_logging_middleware(app)

    # --- Security & Middleware Setup ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    # --- Include Routers ---
    app.include_router(datasets.router)
    app.include_router(predictions.router)
    app.include_router(weather.router)
    app.include_router(system.router)

    # --- Exception Handlers ---
    @app.exception_handler(RiskCastError)
    async def riskcast_exception_handler(request: Request, exc: RiskCastError):
        logger.warning("Unhandled domain error", error=str(exc),
                       error_type=type(exc).__name__, path=request.url.path)
        return JSONResponse(
            status_code=400,
            content={
                "error": type(exc).__name__,
                "detail": str(exc),
                "timestamp": datetime.now().isoformat()
            }
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception", error=str(exc), path=request.url.path, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": "An unexpected error occurred" if not config.debug else str(exc),
                "timestamp": datetime.now().isoformat()
            }
        )

    @app.get("/", summary="API Information", tags=["General"])
    async def root():
        """Get basic API information"""
        return {
            "message": "RiskCast - Dataset-Driven Disaster Risk Prediction",
            "version": config.api_version,
            "docs": "/docs",
            "health": "/health",
            "api": {
                "datasets": "/api/v1/datasets",
                "predictions": "/api/v1/predictions",
                "weather": "/api/v1/weather"
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=default_settings.debug)
