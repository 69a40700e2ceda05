"""
Prediction service

Single entry point for the three scoring paths:
- dataset: correlation-weighted analysis of a stored dataset
- manual: fixed rule tables over user-supplied factors
- live: fixed rule tables over the simulated weather feed

Every result is recorded in the prediction history.
"""
from datetime import datetime
from typing import List, Optional

from config import Settings
from models.base import BaseConditions, DisasterType
from models.dataset_models import Dataset, WeatherRecord
from models.model import LivePredictionRequest, ManualPredictionRequest
from models.prediction_models import (
    DatasetAnalysis,
    PredictionInput,
    PredictionRecord,
    PredictionResult,
)
from services.base_service import BaseService
from services.data_ingestion import DatasetIdSequence, DocumentTableExtractor, ingest_upload
from services.data_storage import DatasetStore, PredictionHistory
from services.exceptions import FileValidationError, ParseError
from services.manual_risk import FixedWeightRiskScorer
from services.prediction_engine import DatasetPredictionEngine, latest_record
from services.weather_service import WeatherService


class PredictionService(BaseService):
    """Coordinates storage, the analysis engine and the rule-table scorer"""

    def __init__(self, store: DatasetStore, history: PredictionHistory,
                 engine: Optional[DatasetPredictionEngine] = None,
                 scorer: Optional[FixedWeightRiskScorer] = None,
                 weather: Optional[WeatherService] = None,
                 extractor: Optional[DocumentTableExtractor] = None,
                 ids: Optional[DatasetIdSequence] = None,
                 config: Optional[Settings] = None):
        self.store = store
        self.history = history
        self.extractor = extractor
        self.ids = ids or DatasetIdSequence()
        super().__init__(config)
        self.engine = engine or DatasetPredictionEngine(self.config)
        self.scorer = scorer or FixedWeightRiskScorer()
        self.weather = weather or WeatherService(self.config)

    # ------------------------------------------------------------------
    # Datasets
    # ------------------------------------------------------------------

    def upload_dataset(self, content: bytes, filename: str,
                       content_type: Optional[str] = None) -> Dataset:
        try:
            dataset = ingest_upload(
                content, filename, content_type,
                extractor=self.extractor, config=self.config, id_factory=self.ids.next_id,
            )
        except (FileValidationError, ParseError) as e:
            self._handle_error(e, {"operation": "upload_dataset", "filename": filename, "bytes": len(content)})
        self.store.save_dataset(dataset)
        self._log_operation("upload_dataset", {
            "dataset_id": dataset.id,
            "records": len(dataset.records),
            "source": dataset.source.value,
        })
        return dataset

    def list_datasets(self) -> List[Dataset]:
        return self.store.get_stored_datasets()

    def get_dataset(self, dataset_id: str) -> Dataset:
        return self.store.get_dataset(dataset_id)

    def delete_dataset(self, dataset_id: str) -> None:
        self.store.delete_dataset(dataset_id)
        self._log_operation("delete_dataset", {"dataset_id": dataset_id})

    def latest_conditions(self, dataset_id: str, location: Optional[str] = None) -> Optional[WeatherRecord]:
        """Most recent record for a location, used to prefill current conditions"""
        return latest_record(self.store.get_dataset(dataset_id), location)

    # ------------------------------------------------------------------
    # Predictions
    # ------------------------------------------------------------------

    def _record(self, result: PredictionResult, location: str, disaster_type: DisasterType,
                conditions: BaseConditions, population: Optional[float] = None,
                dataset_id: Optional[str] = None) -> PredictionRecord:
        entry = PredictionRecord(
            **result.model_dump(),
            location=location,
            disaster_type=disaster_type,
            conditions=conditions,
            population=population,
            dataset_id=dataset_id,
        )
        self.history.add(entry)
        self._log_operation("prediction", {
            "method": result.method.value,
            "disaster_type": disaster_type.value,
            "location": location,
            "risk_score": result.risk_score,
            "risk_level": result.risk_level.value,
        })
        return entry

    def predict_from_dataset(self, dataset_id: str, prediction_input: PredictionInput,
                             now: Optional[datetime] = None) -> PredictionRecord:
        dataset = self.store.get_dataset(dataset_id)
        result = self.engine.generate_dataset_prediction(dataset, prediction_input, now=now)
        return self._record(
            result,
            prediction_input.location,
            prediction_input.disaster_type,
            prediction_input.current_conditions,
            dataset_id=dataset_id,
        )

    def analyze_dataset(self, dataset_id: str, disaster_type: DisasterType,
                        location: str = "all", now: Optional[datetime] = None) -> DatasetAnalysis:
        """Analysis only; raises InsufficientDataError below the record minimum"""
        dataset = self.store.get_dataset(dataset_id)
        return self.engine.analyze(dataset, disaster_type, location, now=now)

    def predict_manual(self, request: ManualPredictionRequest) -> PredictionRecord:
        result = self.scorer.predict_manual(request.disaster_type, request.location, request.factors)
        conditions = BaseConditions(**request.factors.model_dump(exclude={"population"}))
        return self._record(
            result, request.location, request.disaster_type, conditions,
            population=request.factors.population,
        )

    def predict_live(self, request: LivePredictionRequest,
                     now: Optional[datetime] = None) -> PredictionRecord:
        weather = self.weather.fetch_live_weather(request.location, now=now)
        trend = self.weather.weather_trend(request.location, request.trend_hours, now=now)
        result = self.scorer.predict_live(
            request.disaster_type, request.location, weather, trend, request.population
        )
        return self._record(
            result, request.location, request.disaster_type, weather.to_conditions(),
            population=request.population,
        )

    def recent_predictions(self) -> List[PredictionRecord]:
        return self.history.list()

    def clear_history(self):
        self.history.clear()
        self._log_operation("clear_history", {})
