from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from typing import List, Optional
import structlog

from utils.dependencies import verify_api_key, get_prediction_service
from services.prediction_service import PredictionService
from services.exceptions import DatasetNotFoundError, FileValidationError, ParseError
from models.dataset_models import Dataset, DatasetInfo, WeatherRecord

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/api/v1/datasets",
    tags=["Datasets"]
)


@router.post("", response_model=DatasetInfo, status_code=status.HTTP_201_CREATED,
             summary="Upload a CSV or PDF dataset")
async def upload_dataset(
    file: UploadFile = File(..., description="CSV (or PDF) file with environmental readings"),
    service: PredictionService = Depends(get_prediction_service),
    api_key: bool = Depends(verify_api_key)
):
    """Parse an uploaded file into records and store it as a dataset"""
    content = await file.read()
    try:
        dataset = await run_in_threadpool(
            service.upload_dataset, content, file.filename or "", file.content_type
        )
    except FileValidationError as e:
        code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE if e.too_large else status.HTTP_400_BAD_REQUEST
        raise HTTPException(status_code=code, detail=str(e))
    except ParseError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    return DatasetInfo.from_dataset(dataset)


@router.get("", response_model=List[DatasetInfo], summary="List stored datasets")
def list_datasets(service: PredictionService = Depends(get_prediction_service)):
    return [DatasetInfo.from_dataset(d) for d in service.list_datasets()]


@router.get("/{dataset_id}", response_model=Dataset, summary="Get a dataset with its records")
def get_dataset(dataset_id: str, service: PredictionService = Depends(get_prediction_service)):
    try:
        return service.get_dataset(dataset_id)
    except DatasetNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{dataset_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a dataset")
def delete_dataset(
    dataset_id: str,
    service: PredictionService = Depends(get_prediction_service),
    api_key: bool = Depends(verify_api_key)
):
    try:
        service.delete_dataset(dataset_id)
    except DatasetNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{dataset_id}/latest", response_model=Optional[WeatherRecord],
            summary="Latest record for a location")
def latest_record(
    dataset_id: str,
    location: Optional[str] = Query(None, description="Case-insensitive substring; omit for all"),
    service: PredictionService = Depends(get_prediction_service)
):
    """Most recent record, usable as current conditions for a prediction"""
    try:
        record = service.latest_conditions(dataset_id, location)
    except DatasetNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                            detail=f"No records for location '{location}'")
    return record
