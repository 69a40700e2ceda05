"""
RiskCast Data Models
Centralized export of all Pydantic models
"""

# Base models and enums
from .base import (
    DisasterType,
    RiskLevel,
    DatasetSource,
    PredictionMethod,
    BaseConditions,
    FACTORS,
    STANDARD_PRESSURE,
    risk_level_for,
)

# Dataset models (ingestion/storage)
from .dataset_models import (
    WeatherRecord,
    DateRange,
    DatasetSummary,
    Dataset,
    DatasetInfo,
)

# Analysis and prediction models
from .prediction_models import (
    FactorRange,
    RiskPattern,
    DatasetAnalysis,
    PredictionInput,
    PredictionResult,
    PredictionRecord,
)

# Operational request/response models
from .model import (
    LocationProfile,
    EnvironmentalFactors,
    ManualPredictionRequest,
    DatasetPredictionRequest,
    LivePredictionRequest,
    LiveWeather,
    WeatherTrend,
)

__all__ = [
    # Base
    "DisasterType",
    "RiskLevel",
    "DatasetSource",
    "PredictionMethod",
    "BaseConditions",
    "FACTORS",
    "STANDARD_PRESSURE",
    "risk_level_for",

    # Datasets
    "WeatherRecord",
    "DateRange",
    "DatasetSummary",
    "Dataset",
    "DatasetInfo",

    # Analysis / prediction
    "FactorRange",
    "RiskPattern",
    "DatasetAnalysis",
    "PredictionInput",
    "PredictionResult",
    "PredictionRecord",

    # Operational
    "LocationProfile",
    "EnvironmentalFactors",
    "ManualPredictionRequest",
    "DatasetPredictionRequest",
    "LivePredictionRequest",
    "LiveWeather",
    "WeatherTrend",
]
