"""
Seasonal & Trend Agent

Buckets records by quarter of year to derive seasonal risk multipliers,
and fits a least-squares slope over the most recent values of each factor.
"""

import numpy as np
import pandas as pd
from datetime import datetime
from typing import Dict, List, Optional
import logging

from models.base import FACTORS
from models.dataset_models import WeatherRecord

logger = logging.getLogger("riskcast.agents.seasonal_trend")

QUARTERS = ("q1", "q2", "q3", "q4")


def quarter_index(month: int) -> int:
    """Quarter bucket (0-3) for a 1-based calendar month"""
    return (month - 1) // 3


def current_quarter(now: Optional[datetime] = None) -> str:
    """Bucket key for the current calendar quarter"""
    now = now or datetime.now()
    return QUARTERS[quarter_index(now.month)]


def parse_date(value: Optional[str]) -> Optional[pd.Timestamp]:
    """Parse a record date, returning None when it cannot be read"""
    if not value:
        return None
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert(None)
    return parsed


def ols_slope(values: List[float]) -> float:
    """Least-squares slope of values against 0..n-1"""
    n = len(values)
    if n < 2:
        return 0.0
    ys = np.asarray(values, dtype=float)
    xs = np.arange(n, dtype=float)

    sum_x = n * (n - 1) / 2
    sum_xx = n * (n - 1) * (2 * n - 1) / 6
    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return 0.0
    return float((n * (xs * ys).sum() - sum_x * ys.sum()) / denominator)


class SeasonalTrendAgent:
    """
    Agent that estimates seasonal multipliers and per-factor trends

    Trends are informational: nothing downstream feeds them into a score.
    """

    def __init__(self, trend_window: int = 30, min_trend_points: int = 6,
                 seasonal_baseline: float = 50.0):
        """
        Args:
            trend_window: How many of the latest values feed each slope
            min_trend_points: Below this, the slope is reported as 0
            seasonal_baseline: Average (rainfall, humidity) level that maps to 1.0
        """
        self.trend_window = trend_window
        self.min_trend_points = min_trend_points
        self.seasonal_baseline = seasonal_baseline

        logger.info(f"SeasonalTrendAgent initialized: window={trend_window}")

    def calculate_seasonal_factors(self, records: List[WeatherRecord]) -> Dict[str, float]:
        """
        Multiplier per quarter: mean of (rainfall + humidity) / 2, over the baseline

        Records without a parseable date are ignored. Empty quarters get 1.0.
        """
        buckets: Dict[int, List[float]] = {i: [] for i in range(len(QUARTERS))}

        for record in records:
            parsed = parse_date(record.date)
            if parsed is None:
                continue
            rainfall = record.numeric("rainfall") or 0.0
            humidity = record.numeric("humidity") or 0.0
            buckets[quarter_index(parsed.month)].append((rainfall + humidity) / 2)

        factors: Dict[str, float] = {}
        for index, key in enumerate(QUARTERS):
            values = buckets[index]
            if values:
                factors[key] = float(np.mean(values)) / self.seasonal_baseline
            else:
                factors[key] = 1.0
        return factors

    def calculate_trends(self, records: List[WeatherRecord]) -> Dict[str, float]:
        """Slope of the last `trend_window` values for each factor"""
        trends: Dict[str, float] = {}
        for factor in FACTORS:
            values = [v for v in (r.numeric(factor) for r in records) if v is not None]
            values = values[-self.trend_window:]
            if len(values) >= self.min_trend_points:
                trends[factor] = ols_slope(values)
            else:
                trends[factor] = 0.0
        return trends
