from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List
import structlog

from utils.dependencies import verify_api_key, get_prediction_service
from services.prediction_service import PredictionService
from services.exceptions import DatasetNotFoundError, InsufficientDataError, UnknownLocationError
from models.base import DisasterType
from models.model import DatasetPredictionRequest, LivePredictionRequest, ManualPredictionRequest
from models.prediction_models import DatasetAnalysis, PredictionInput, PredictionRecord

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/api/v1/predictions",
    tags=["Predictions"]
)


@router.post("/dataset", response_model=PredictionRecord, summary="Predict risk from a stored dataset")
def predict_from_dataset(
    payload: DatasetPredictionRequest,
    service: PredictionService = Depends(get_prediction_service)
):
    """
    Correlation-weighted prediction from historical records.

    Fewer than the minimum number of matching records returns the fixed
    low-confidence fallback (method = "fallback").
    """
    prediction_input = PredictionInput(**payload.model_dump(exclude={"dataset_id"}))
    try:
        return service.predict_from_dataset(payload.dataset_id, prediction_input)
    except DatasetNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/analysis", response_model=DatasetAnalysis, summary="Dataset analysis without scoring")
def analyze_dataset(
    dataset_id: str = Query(...),
    disaster_type: DisasterType = Query(DisasterType.FLOOD),
    location: str = Query("all"),
    service: PredictionService = Depends(get_prediction_service)
):
    try:
        return service.analyze_dataset(dataset_id, disaster_type, location)
    except DatasetNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InsufficientDataError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.post("/manual", response_model=PredictionRecord, summary="Predict risk from manual input")
def predict_manual(
    payload: ManualPredictionRequest,
    service: PredictionService = Depends(get_prediction_service)
):
    try:
        return service.predict_manual(payload)
    except UnknownLocationError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/live", response_model=PredictionRecord, summary="Predict risk from the live weather feed")
def predict_live(
    payload: LivePredictionRequest,
    service: PredictionService = Depends(get_prediction_service)
):
    try:
        return service.predict_live(payload)
    except UnknownLocationError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/history", response_model=List[PredictionRecord], summary="Recent predictions")
def prediction_history(service: PredictionService = Depends(get_prediction_service)):
    """Up to the last 10 predictions, newest first"""
    return service.recent_predictions()


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT, summary="Clear prediction history")
def clear_history(
    service: PredictionService = Depends(get_prediction_service),
    api_key: bool = Depends(verify_api_key)
):
    service.clear_history()
