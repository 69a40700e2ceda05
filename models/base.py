"""
Shared base models and enums for RiskCast
Used by the dataset, analysis and prediction models
"""

from pydantic import BaseModel, Field
from typing import Tuple
from enum import Enum


# ============= Enums =============

class DisasterType(str, Enum):
    """Disaster types the scoring paths understand"""
    FLOOD = "flood"
    EARTHQUAKE = "earthquake"
    CYCLONE = "cyclone"
    LANDSLIDE = "landslide"
    HEAT = "heat"  # Dataset path only; no fixed rule table exists for it


class RiskLevel(str, Enum):
    """Risk tier shown alongside a score"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class DatasetSource(str, Enum):
    """How a dataset entered the system"""
    CSV = "csv"
    PDF = "pdf"


class PredictionMethod(str, Enum):
    """Which scoring path produced a prediction"""
    DATASET = "dataset"
    FALLBACK = "fallback"
    MANUAL = "manual"
    LIVE = "live"


# Tracked environmental factors, in evaluation order
FACTORS: Tuple[str, ...] = ("rainfall", "temperature", "humidity", "wind_speed", "pressure")

# Standard sea-level pressure (hPa)
STANDARD_PRESSURE = 1013.0


# ============= Base Conditions Model =============

class BaseConditions(BaseModel):
    """Current environmental conditions fed into a prediction"""
    rainfall: float = Field(0.0, ge=0.0, le=5000.0, description="Rainfall (mm)")
    temperature: float = Field(25.0, ge=-100.0, le=100.0, description="Temperature (C)")
    humidity: float = Field(60.0, ge=0.0, le=100.0, description="Relative humidity (%)")
    wind_speed: float = Field(10.0, ge=0.0, le=500.0, description="Wind speed (km/h)")
    pressure: float = Field(STANDARD_PRESSURE, ge=800.0, le=1100.0, description="Pressure (hPa)")


# ============= Helpers =============

def risk_level_for(score: float) -> RiskLevel:
    """Map a 0-100 score onto its tier"""
    if score >= 70:
        return RiskLevel.HIGH
    if score >= 40:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
