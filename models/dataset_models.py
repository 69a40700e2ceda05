"""
Dataset models for RiskCast
Records, summaries and stored datasets produced by ingestion
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Union
from datetime import datetime
import math

from .base import DatasetSource, FACTORS

# A numeric slot keeps the raw string when the cell could not be parsed
NumericCell = Optional[Union[float, str]]


class WeatherRecord(BaseModel):
    """One environmental observation row"""
    date: Optional[str] = None
    location: Optional[str] = None
    temperature: NumericCell = None
    humidity: NumericCell = None
    pressure: NumericCell = None
    wind_speed: NumericCell = None
    rainfall: NumericCell = None

    model_config = ConfigDict(extra="forbid")

    def numeric(self, factor: str) -> Optional[float]:
        """Return the factor as a finite float, or None if missing/non-numeric"""
        value = getattr(self, factor, None)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if math.isnan(value) or math.isinf(value):
            return None
        return float(value)

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in type(self).model_fields)

    def populated_factors(self) -> int:
        return sum(1 for factor in FACTORS if getattr(self, factor) is not None)


class DateRange(BaseModel):
    start: str = ""
    end: str = ""


class DatasetSummary(BaseModel):
    """Aggregate statistics over a record collection"""
    total_records: int = 0
    date_range: DateRange = Field(default_factory=DateRange)
    locations: List[str] = Field(default_factory=list)
    avg_temperature: int = 0
    avg_humidity: int = 0
    avg_rainfall: float = 0


class Dataset(BaseModel):
    """A named, stored collection of records"""
    id: str
    name: str
    source: DatasetSource
    upload_date: datetime
    records: List[WeatherRecord] = Field(default_factory=list)
    columns: List[str] = Field(default_factory=list)
    summary: DatasetSummary = Field(default_factory=DatasetSummary)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "1718101234567",
                "name": "mumbai_monsoon_2024",
                "source": "csv",
                "upload_date": "2024-06-11T10:20:34",
                "records": [
                    {"date": "2024-06-01", "location": "Mumbai", "temperature": 29.0,
                     "humidity": 88.0, "rainfall": 112.5}
                ],
                "columns": ["date", "location", "temp", "humidity", "rain"],
                "summary": {
                    "total_records": 1,
                    "date_range": {"start": "2024-06-01", "end": "2024-06-01"},
                    "locations": ["Mumbai"],
                    "avg_temperature": 29,
                    "avg_humidity": 88,
                    "avg_rainfall": 112.5
                }
            }
        }
    )


class DatasetInfo(BaseModel):
    """Dataset listing entry without the record payload"""
    id: str
    name: str
    source: DatasetSource
    upload_date: datetime
    columns: List[str]
    summary: DatasetSummary

    @classmethod
    def from_dataset(cls, dataset: Dataset) -> "DatasetInfo":
        return cls(
            id=dataset.id,
            name=dataset.name,
            source=dataset.source,
            upload_date=dataset.upload_date,
            columns=dataset.columns,
            summary=dataset.summary,
        )
