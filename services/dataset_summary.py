"""
Dataset Summary Builder

Aggregate statistics over a record collection: counts, date span,
location set and field averages.
"""

from typing import List
import logging

import pandas as pd

from models.dataset_models import WeatherRecord, DatasetSummary, DateRange

logger = logging.getLogger("riskcast.dataset_summary")


def _numeric_series(records: List[WeatherRecord], field: str) -> pd.Series:
    values = [record.numeric(field) for record in records]
    return pd.Series([v for v in values if v is not None], dtype="float64")


def build_summary(records: List[WeatherRecord]) -> DatasetSummary:
    """
    Compute summary statistics for a list of records.

    Dates are compared as plain strings, so the reported range is only
    calendar-correct for zero-padded ISO-8601 dates.

    Args:
        records: Normalized weather records

    Returns:
        DatasetSummary with averages over present numeric values only
    """
    dates = sorted(record.date for record in records if record.date)
    locations = sorted({record.location for record in records if record.location})

    temperatures = _numeric_series(records, "temperature")
    humidity = _numeric_series(records, "humidity")
    rainfall = _numeric_series(records, "rainfall")

    summary = DatasetSummary(
        total_records=len(records),
        date_range=DateRange(
            start=dates[0] if dates else "",
            end=dates[-1] if dates else "",
        ),
        locations=locations,
        avg_temperature=int(round(float(temperatures.mean()))) if len(temperatures) else 0,
        avg_humidity=int(round(float(humidity.mean()))) if len(humidity) else 0,
        avg_rainfall=round(float(rainfall.mean()), 1) if len(rainfall) else 0,
    )

    logger.debug(f"Summary built: {summary.total_records} records, {len(locations)} locations")
    return summary
