"""
Dataset Prediction Engine

Coordinates the analysis agents into the dataset-driven prediction path.

Flow:
1. Filter the dataset to the requested location (and date bounds)
2. Too few records -> InsufficientDataError (callers map it to the fallback)
3. Correlation Analyzer -> Pattern Detector -> Seasonal & Trend estimator
4. Risk Synthesizer combines the analysis with current conditions
"""

from datetime import datetime
from typing import List, Optional
import logging

from agents.correlation_agent import CorrelationAnalyzerAgent
from agents.pattern_detection_agent import PatternDetectionAgent
from agents.risk_synthesis_agent import RiskSynthesisAgent
from agents.seasonal_trend_agent import SeasonalTrendAgent, parse_date
from config import Settings, settings as default_settings
from models.base import DisasterType, FACTORS, PredictionMethod, RiskLevel
from models.dataset_models import Dataset, WeatherRecord
from models.prediction_models import DatasetAnalysis, PredictionInput, PredictionResult
from services.exceptions import InsufficientDataError

logger = logging.getLogger("riskcast.prediction_engine")


def filter_records(dataset: Dataset, location: Optional[str] = None,
                   start_date: Optional[str] = None,
                   end_date: Optional[str] = None) -> List[WeatherRecord]:
    """
    Records relevant to a location and optional date bounds

    Location matching is a case-insensitive substring test; "all" or an empty
    location keeps every record. Date bounds compare strings and keep
    records that have no date.
    """
    records = dataset.records

    if location and location.lower() != "all":
        needle = location.lower()
        records = [r for r in records if r.location and needle in r.location.lower()]

    if start_date:
        records = [r for r in records if not r.date or r.date >= start_date]
    if end_date:
        records = [r for r in records if not r.date or r.date <= end_date]

    return records


def latest_record(dataset: Dataset, location: Optional[str] = None) -> Optional[WeatherRecord]:
    """Most recent record for a location; undated records sort last"""
    records = filter_records(dataset, location)
    if not records:
        return None

    dated = [(parse_date(r.date), i) for i, r in enumerate(records)]
    dated_only = [(ts, i) for ts, i in dated if ts is not None]
    if not dated_only:
        return records[0]
    _, index = max(dated_only, key=lambda item: (item[0], -item[1]))
    return records[index]


def fallback_prediction() -> PredictionResult:
    """Fixed low-confidence result used when the dataset is too small"""
    return PredictionResult(
        risk_score=30,
        risk_level=RiskLevel.LOW,
        confidence=40,
        timeline="2-5 days",
        affected_population=2000,
        recommendations=[
            "Insufficient historical data - using basic risk assessment",
            "Upload more data for improved predictions",
        ],
        reasoning=[
            "Basic prediction due to limited dataset",
            "Recommendation: Upload more comprehensive historical data",
        ],
        analysis=None,
        method=PredictionMethod.FALLBACK,
    )


class DatasetPredictionEngine:
    """
    Unified interface for dataset-driven predictions

    Every computation is a pure function of the dataset, the input and the
    clock; the engine holds no per-request state.
    """

    def __init__(self, config: Settings = default_settings):
        self.min_records = config.min_dataset_records

        self.correlation_agent = CorrelationAnalyzerAgent(min_points=config.min_correlation_points)
        self.pattern_agent = PatternDetectionAgent()
        self.seasonal_agent = SeasonalTrendAgent(trend_window=config.trend_window)
        self.synthesis_agent = RiskSynthesisAgent(pattern_agent=self.pattern_agent)

        logger.info(f"DatasetPredictionEngine initialized: min_records={self.min_records}")

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def analyze_dataset(self, records: List[WeatherRecord], disaster_type: DisasterType,
                        now: Optional[datetime] = None) -> DatasetAnalysis:
        """Run every analysis agent over the records"""
        return DatasetAnalysis(
            correlations=self.correlation_agent.calculate_correlations(records, disaster_type),
            trends=self.seasonal_agent.calculate_trends(records),
            risk_patterns=self.pattern_agent.identify_risk_patterns(records, disaster_type),
            seasonal_factors=self.seasonal_agent.calculate_seasonal_factors(records),
            confidence=self.analysis_confidence(records, now=now),
        )

    def analysis_confidence(self, records: List[WeatherRecord],
                            now: Optional[datetime] = None) -> float:
        """Blend of volume, completeness and recency, 0-100"""
        volume = min(len(records), 100)
        completeness = self.data_completeness(records)
        recency = self.data_recency(records, now=now)
        return float(round(volume * 0.4 + completeness * 0.3 + recency * 0.3))

    @staticmethod
    def data_completeness(records: List[WeatherRecord]) -> float:
        """Percentage of tracked factor slots that hold a value"""
        total = len(records) * len(FACTORS)
        if total == 0:
            return 0.0
        filled = sum(record.populated_factors() for record in records)
        return filled / total * 100

    @staticmethod
    def data_recency(records: List[WeatherRecord], now: Optional[datetime] = None) -> float:
        """Score by age of the latest parseable date; 50 when nothing is dated"""
        dates = [d for d in (parse_date(r.date) for r in records) if d is not None]
        if not dates:
            return 50.0

        latest = max(dates)
        now = now or datetime.now()
        days_since = (now - latest.to_pydatetime()).total_seconds() / 86400

        if days_since <= 7:
            return 100.0
        if days_since <= 30:
            return 80.0
        if days_since <= 90:
            return 60.0
        return 40.0

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------

    def relevant_records(self, dataset: Dataset, location: str) -> List[WeatherRecord]:
        records = filter_records(dataset, location)
        if len(records) < self.min_records:
            raise InsufficientDataError(len(records), self.min_records)
        return records

    def analyze(self, dataset: Dataset, disaster_type: DisasterType, location: str = "all",
                now: Optional[datetime] = None) -> DatasetAnalysis:
        """Analysis only, for a location-filtered dataset"""
        records = self.relevant_records(dataset, location)
        return self.analyze_dataset(records, disaster_type, now=now)

    def predict(self, dataset: Dataset, prediction_input: PredictionInput,
                now: Optional[datetime] = None) -> PredictionResult:
        """
        Dataset-driven prediction

        Raises:
            InsufficientDataError: fewer than min_records matching records
        """
        records = self.relevant_records(dataset, prediction_input.location)
        logger.info(
            f"Analyzing {len(records)} records from '{dataset.name}' "
            f"for {prediction_input.disaster_type.value} at '{prediction_input.location}'"
        )

        analysis = self.analyze_dataset(records, prediction_input.disaster_type, now=now)
        return self.synthesis_agent.synthesize(
            prediction_input.current_conditions,
            analysis,
            prediction_input.disaster_type,
            now=now,
        )

    def generate_dataset_prediction(self, dataset: Dataset, prediction_input: PredictionInput,
                                    now: Optional[datetime] = None) -> PredictionResult:
        """Dataset prediction with the fixed fallback for small datasets"""
        try:
            return self.predict(dataset, prediction_input, now=now)
        except InsufficientDataError as e:
            logger.warning(f"Using fallback prediction: {e}")
            return fallback_prediction()
