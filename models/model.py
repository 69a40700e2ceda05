from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List, Optional
from datetime import datetime

# Import shared base models
from .base import BaseConditions, DisasterType
from .prediction_models import PredictionInput


class LocationProfile(BaseModel):
    """Static per-location attributes used by the fixed rule tables"""
    value: str
    label: str
    seismic_zone: int = Field(..., ge=0, le=5)
    coastal_risk: float = Field(..., ge=0.0, le=1.0)


class EnvironmentalFactors(BaseConditions):
    """Current conditions plus population density for the rule-table path"""
    population: float = Field(5000.0, ge=0.0, le=1_000_000.0, description="People per km2")


class ManualPredictionRequest(BaseModel):
    disaster_type: DisasterType
    location: str = Field("mumbai", min_length=1, max_length=100)
    factors: EnvironmentalFactors = Field(default_factory=EnvironmentalFactors)

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "disaster_type": "cyclone",
                "location": "chennai",
                "factors": {
                    "rainfall": 60, "temperature": 31, "humidity": 78,
                    "wind_speed": 95, "pressure": 985, "population": 9000
                }
            }
        }
    )

    @field_validator('disaster_type')
    @classmethod
    def check_rule_table_exists(cls, v):
        if v == DisasterType.HEAT:
            raise ValueError("No fixed-weight rule table exists for 'heat'; use the dataset path")
        return v


class LivePredictionRequest(BaseModel):
    """Live-mode prediction: conditions come from the simulated weather feed"""
    disaster_type: DisasterType
    location: str = Field("mumbai", min_length=1, max_length=100)
    population: float = Field(5000.0, ge=0.0, le=1_000_000.0)
    trend_hours: int = Field(12, ge=0, le=72)

    @field_validator('disaster_type')
    @classmethod
    def check_rule_table_exists(cls, v):
        if v == DisasterType.HEAT:
            raise ValueError("No fixed-weight rule table exists for 'heat'; use the dataset path")
        return v


class LiveWeather(BaseModel):
    """One reading from the live weather feed"""
    temperature: float
    humidity: float
    pressure: float
    wind_speed: float
    rainfall: float
    location: str
    timestamp: datetime
    source: str

    def to_conditions(self) -> BaseConditions:
        return BaseConditions(
            rainfall=self.rainfall,
            temperature=self.temperature,
            humidity=self.humidity,
            wind_speed=self.wind_speed,
            pressure=self.pressure,
        )


class WeatherTrend(BaseModel):
    location: str
    hours: int
    points: List[LiveWeather]
    api_key_configured: bool = False
    refresh_seconds: Optional[int] = None


class DatasetPredictionRequest(PredictionInput):
    """Dataset-mode prediction: which stored dataset to analyze"""
    dataset_id: str = Field(..., min_length=1)
