"""
RiskCast Services
Centralized export of all service classes
"""

from .base_service import BaseService
from .exceptions import (
    RiskCastError,
    FileValidationError,
    ParseError,
    InsufficientDataError,
    DatasetNotFoundError,
    UnknownLocationError,
)
from .data_ingestion import (
    DatasetIdSequence,
    DatasetNormalizer,
    parse_csv,
    parse_document,
    validate_upload,
    ingest_upload,
)
from .dataset_summary import build_summary
from .data_storage import DatasetStore, InMemoryDatasetStore, JsonFileDatasetStore, PredictionHistory
from .prediction_engine import DatasetPredictionEngine, fallback_prediction, filter_records, latest_record
from .manual_risk import FixedWeightRiskScorer, LOCATIONS, get_location_profile
from .weather_service import WeatherService
from .prediction_service import PredictionService

__all__ = [
    # Base classes
    "BaseService",

    # Errors
    "RiskCastError",
    "FileValidationError",
    "ParseError",
    "InsufficientDataError",
    "DatasetNotFoundError",
    "UnknownLocationError",

    # Ingestion
    "DatasetIdSequence",
    "DatasetNormalizer",
    "parse_csv",
    "parse_document",
    "validate_upload",
    "ingest_upload",
    "build_summary",

    # Storage
    "DatasetStore",
    "InMemoryDatasetStore",
    "JsonFileDatasetStore",
    "PredictionHistory",

    # Scoring
    "DatasetPredictionEngine",
    "fallback_prediction",
    "filter_records",
    "latest_record",
    "FixedWeightRiskScorer",
    "LOCATIONS",
    "get_location_profile",

    # Services
    "WeatherService",
    "PredictionService",
]
