"""
Analysis and prediction models for RiskCast
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, List, Optional
from datetime import datetime
import uuid

from .base import BaseConditions, DisasterType, PredictionMethod, RiskLevel


class FactorRange(BaseModel):
    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


class RiskPattern(BaseModel):
    """Observed factor ranges associated with historically high derived risk"""
    conditions: Dict[str, FactorRange] = Field(default_factory=dict)
    risk_score: float = 85
    occurrences: int = 0
    disaster_type: DisasterType


class DatasetAnalysis(BaseModel):
    """Derived from a dataset and disaster type; never persisted"""
    correlations: Dict[str, float] = Field(default_factory=dict)
    trends: Dict[str, float] = Field(default_factory=dict)
    risk_patterns: List[RiskPattern] = Field(default_factory=list)
    seasonal_factors: Dict[str, float] = Field(default_factory=dict)
    confidence: float = 0


class PredictionInput(BaseModel):
    """Disaster type, location and current conditions for a dataset prediction"""
    disaster_type: DisasterType
    location: str = Field("all", max_length=100)
    current_conditions: BaseConditions = Field(default_factory=BaseConditions)

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "disaster_type": "flood",
                "location": "mumbai",
                "current_conditions": {
                    "rainfall": 120, "temperature": 29, "humidity": 85,
                    "wind_speed": 25, "pressure": 995
                }
            }
        }
    )


class PredictionResult(BaseModel):
    """Outcome of any scoring path"""
    risk_score: int = Field(..., ge=0, le=100)
    risk_level: RiskLevel
    confidence: float = Field(..., ge=0, le=100)
    timeline: str
    affected_population: int = Field(..., ge=0)
    recommendations: List[str] = Field(default_factory=list)
    reasoning: List[str] = Field(default_factory=list)
    analysis: Optional[DatasetAnalysis] = None
    method: PredictionMethod


class PredictionRecord(PredictionResult):
    """History entry: a result plus the inputs that produced it"""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = Field(default_factory=datetime.now)
    location: str
    disaster_type: DisasterType
    conditions: BaseConditions
    population: Optional[float] = None
    dataset_id: Optional[str] = None
