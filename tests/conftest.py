"""
Shared fixtures for the RiskCast test suite
"""

import random
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import Settings
from models.base import DatasetSource
from models.dataset_models import Dataset, WeatherRecord
from models.model import LiveWeather
from services.dataset_summary import build_summary


def make_dataset(records: List[WeatherRecord], dataset_id: str = "ds-1",
                 name: str = "test_dataset") -> Dataset:
    return Dataset(
        id=dataset_id,
        name=name,
        source=DatasetSource.CSV,
        upload_date=datetime(2024, 6, 1, 12, 0, 0),
        records=records,
        columns=["date", "location", "temperature", "humidity", "pressure", "wind_speed", "rainfall"],
        summary=build_summary(records),
    )


def make_live_weather(rainfall: float = 0.0, temperature: float = 30.0, humidity: float = 70.0,
                      wind_speed: float = 10.0, pressure: float = 1010.0,
                      timestamp: Optional[datetime] = None) -> LiveWeather:
    return LiveWeather(
        temperature=temperature,
        humidity=humidity,
        pressure=pressure,
        wind_speed=wind_speed,
        rainfall=rainfall,
        location="Mumbai",
        timestamp=timestamp or datetime(2024, 7, 15, 12, 0, 0),
        source="Test Feed",
    )


@pytest.fixture
def test_settings(tmp_path):
    """In-memory settings that never touch the working directory"""
    return Settings(
        use_file_storage=False,
        data_dir=str(tmp_path),
        api_key=None,
        openweather_api_key=None,
    )


@pytest.fixture
def flood_records():
    """15 identical high-risk flood observations"""
    return [
        WeatherRecord(
            date=f"2024-07-{day:02d}",
            location="Mumbai",
            rainfall=150.0,
            humidity=90.0,
            pressure=980.0,
        )
        for day in range(1, 16)
    ]


@pytest.fixture
def mixed_records():
    """Thirty days of varied readings across two cities"""
    rng = random.Random(42)
    start = datetime(2024, 1, 1)
    records = []
    for i in range(30):
        records.append(WeatherRecord(
            date=(start + timedelta(days=i * 7)).strftime("%Y-%m-%d"),
            location="Mumbai" if i % 3 else "Delhi",
            temperature=round(rng.uniform(15, 40), 1),
            humidity=round(rng.uniform(30, 95), 1),
            pressure=round(rng.uniform(970, 1020), 1),
            wind_speed=round(rng.uniform(0, 120), 1),
            rainfall=round(rng.uniform(0, 200), 1),
        ))
    return records
