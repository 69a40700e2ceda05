"""
Correlation Analyzer Agent

Derives a synthetic historical risk score per record for a disaster type,
then measures how strongly each environmental factor tracks that score.
"""

import numpy as np
from typing import Dict, List, Sequence
import logging

from models.base import DisasterType, FACTORS, STANDARD_PRESSURE
from models.dataset_models import WeatherRecord

logger = logging.getLogger("riskcast.agents.correlation")


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient over the common prefix of x and y

    Returns 0 for fewer than two points or a zero denominator.
    """
    n = min(len(x), len(y))
    if n < 2:
        return 0.0

    xs = np.asarray(x[:n], dtype=float)
    ys = np.asarray(y[:n], dtype=float)
    if np.ptp(xs) == 0 or np.ptp(ys) == 0:
        return 0.0

    sum_x = xs.sum()
    sum_y = ys.sum()
    sum_xy = (xs * ys).sum()
    sum_xx = (xs * xs).sum()
    sum_yy = (ys * ys).sum()

    numerator = n * sum_xy - sum_x * sum_y
    variance_product = (n * sum_xx - sum_x ** 2) * (n * sum_yy - sum_y ** 2)
    if variance_product <= 0:
        return 0.0

    denominator = np.sqrt(variance_product)
    if denominator == 0 or not np.isfinite(denominator):
        return 0.0

    return float(np.clip(numerator / denominator, -1.0, 1.0))


def historical_risk_score(record: WeatherRecord, disaster_type: DisasterType) -> float:
    """Derived risk for one record, clamped to [0, 100]"""
    def value(factor: str, default: float = 0.0) -> float:
        v = record.numeric(factor)
        return default if v is None else v

    rainfall = value("rainfall")
    humidity = value("humidity")
    temperature = value("temperature")
    wind_speed = value("wind_speed")
    pressure = value("pressure", STANDARD_PRESSURE)

    if disaster_type == DisasterType.FLOOD:
        risk = rainfall * 0.4 + humidity * 0.3 + (1000 - pressure) * 0.3
    elif disaster_type == DisasterType.CYCLONE:
        risk = wind_speed * 0.5 + (STANDARD_PRESSURE - pressure) * 0.3 + temperature * 0.2
    elif disaster_type == DisasterType.LANDSLIDE:
        risk = rainfall * 0.6 + humidity * 0.4
    else:
        risk = temperature + rainfall + humidity

    return float(min(max(risk, 0.0), 100.0))


def historical_risk_scores(records: List[WeatherRecord], disaster_type: DisasterType) -> List[float]:
    return [historical_risk_score(record, disaster_type) for record in records]


class CorrelationAnalyzerAgent:
    """
    Agent that correlates environmental factors with derived historical risk

    Sparse factors never raise: fewer than `min_points` numeric values
    yields a correlation of exactly 0.
    """

    def __init__(self, min_points: int = 6):
        self.min_points = min_points
        logger.info(f"CorrelationAnalyzerAgent initialized: min_points={min_points}")

    def factor_values(self, records: List[WeatherRecord], factor: str) -> List[float]:
        """Numeric values of a factor in record order, missing ones skipped"""
        values = (record.numeric(factor) for record in records)
        return [v for v in values if v is not None]

    def calculate_correlations(self, records: List[WeatherRecord],
                               disaster_type: DisasterType) -> Dict[str, float]:
        """
        Correlate each tracked factor against the derived risk series

        The factor's values (missing ones skipped) are paired positionally
        with the full risk series and truncated to the shorter length.
        """
        risk_scores = historical_risk_scores(records, disaster_type)
        correlations: Dict[str, float] = {}

        for factor in FACTORS:
            values = self.factor_values(records, factor)
            if len(values) >= self.min_points:
                correlations[factor] = pearson_correlation(values, risk_scores)
            else:
                correlations[factor] = 0.0

        logger.debug(f"Correlations for {disaster_type.value}: {correlations}")
        return correlations
